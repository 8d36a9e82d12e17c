"""Time log repository: running-timer lookups and stopping timers."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.infrastructure.persistence.filters import FilterSpec
from projecthub.infrastructure.persistence.models.task import Task
from projecthub.infrastructure.persistence.models.time_log import TimeLog
from projecthub.infrastructure.persistence.repositories.base import BaseRepository
from projecthub.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class TimeLogRepository(BaseRepository[TimeLog]):
    """Time logs; a row with ended_at IS NULL is a running timer."""

    filter_spec = FilterSpec(
        exact=("workspace_id", "user_id", "task_id", "is_billable"),
        search=("description",),
        date_column="started_at",
        null_checks={"is_running": ("ended_at", False)},
        order_by=(("started_at", "desc"),),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, TimeLog)

    async def create(self, data: dict[str, Any]) -> TimeLog:
        """Create the log; workspace_id defaults to the task's workspace."""
        if data.get("workspace_id") is None and data.get("task_id") is not None:
            stmt = select(Task.workspace_id).where(Task.id == int(data["task_id"]))
            workspace_id = (await self.db.execute(stmt)).scalar_one()
            data = {**data, "workspace_id": workspace_id}
        return await super().create(data)

    async def find_running_for_user(
        self, user_id: int, exclude_id: int | None = None, lock: bool = False
    ) -> TimeLog | None:
        """Return the user's running log, optionally locking it for this transaction."""
        stmt = select(TimeLog).where(TimeLog.user_id == user_id, TimeLog.ended_at.is_(None))
        if exclude_id is not None:
            stmt = stmt.where(TimeLog.id != exclude_id)
        if lock:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt.order_by(TimeLog.started_at.desc()).limit(1))
        return result.scalar_one_or_none()

    async def has_running_log(
        self, user_id: int, exclude_id: int | None = None, lock: bool = True
    ) -> bool:
        return (
            await self.find_running_for_user(user_id, exclude_id=exclude_id, lock=lock)
        ) is not None

    async def stop(self, log: TimeLog, ended_at: datetime | None = None) -> TimeLog:
        """End a running log and compute its duration in whole minutes (at least 1)."""
        end = ensure_utc(ended_at) or utc_now()
        start = ensure_utc(log.started_at)
        assert start is not None
        minutes = max(1, math.ceil((end - start).total_seconds() / 60))
        logger.info("Stopping time log %s for user %s after %s min", log.id, log.user_id, minutes)
        return await self.update(log, {"ended_at": end, "duration": minutes})

    async def total_minutes(self, task_id: int) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.sum(TimeLog.duration), 0)).where(TimeLog.task_id == task_id)
        )
        return int(result.scalar_one())
