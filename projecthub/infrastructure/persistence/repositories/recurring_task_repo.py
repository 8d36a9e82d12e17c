"""Recurring task repository: due-work queries for the external scheduler."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from projecthub.application.services.recurrence import calculate_next_due_date
from projecthub.domain.exceptions import DomainInvariantException, ResourceNotFoundException
from projecthub.infrastructure.persistence.database import atomic
from projecthub.infrastructure.persistence.filters import FilterSpec, coerce_bool
from projecthub.infrastructure.persistence.models.task import RecurringTask, Task
from projecthub.infrastructure.persistence.repositories.base import BaseRepository
from projecthub.shared.utils.datetime import utc_now, utc_today

logger = logging.getLogger(__name__)


class RecurringTaskRepository(BaseRepository[RecurringTask]):
    """Recurring task repository. get_due() is what a scheduler polls."""

    filter_spec = FilterSpec(
        exact=("task_id", "frequency", "is_active"),
        ranges={
            "due_date_from": ("next_due_date", "gte"),
            "due_date_to": ("next_due_date", "lte"),
        },
        order_by=(("next_due_date", "asc"),),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, RecurringTask)

    @staticmethod
    def _due_predicate() -> ColumnElement[bool]:
        return (RecurringTask.is_active.is_(True)) & (RecurringTask.next_due_date <= utc_today())

    def _extra_predicates(self, filters: dict[str, Any]) -> list[ColumnElement[bool]]:
        if coerce_bool(filters.get("is_due")):
            return [self._due_predicate()]
        return []

    async def get_by_task(self, task_id: int) -> RecurringTask | None:
        result = await self.db.execute(
            select(RecurringTask).where(RecurringTask.task_id == task_id)
        )
        return result.scalar_one_or_none()

    async def get_due(self) -> list[RecurringTask]:
        """Active recurrences whose next_due_date is today or earlier."""
        result = await self.db.execute(
            select(RecurringTask)
            .where(self._due_predicate())
            .order_by(RecurringTask.next_due_date, RecurringTask.id)
        )
        return list(result.scalars().all())

    async def get_by_frequency(self, frequency: str) -> list[RecurringTask]:
        result = await self.db.execute(
            select(RecurringTask)
            .where(RecurringTask.frequency == frequency, RecurringTask.is_active.is_(True))
            .order_by(RecurringTask.next_due_date, RecurringTask.id)
        )
        return list(result.scalars().all())

    async def get_active_count(self) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(RecurringTask).where(RecurringTask.is_active.is_(True))
        )
        return result.scalar_one()

    async def get_due_count(self) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(RecurringTask).where(self._due_predicate())
        )
        return result.scalar_one()

    async def get_count_by_frequency(self) -> dict[str, int]:
        """Active recurrence counts keyed by frequency."""
        result = await self.db.execute(
            select(RecurringTask.frequency, func.count())
            .where(RecurringTask.is_active.is_(True))
            .group_by(RecurringTask.frequency)
        )
        return {frequency: count for frequency, count in result.all()}

    async def advance(self, recurring: RecurringTask) -> RecurringTask:
        """Move next_due_date forward one period; deactivate past end_date."""
        next_due = calculate_next_due_date(
            recurring.frequency,
            recurring.interval,
            recurring.next_due_date,
            recurring.day_of_month,
        )
        data: dict[str, Any] = {"next_due_date": next_due, "last_generated_at": utc_now()}
        if recurring.end_date is not None and next_due > recurring.end_date:
            data["is_active"] = False
            logger.info(
                "Recurring task %s reached end date %s; deactivated",
                recurring.id,
                recurring.end_date,
            )
        return await self.update(recurring, data)

    async def update(self, recurring: RecurringTask, data: dict[str, Any]) -> RecurringTask:
        """Update the schedule.

        A changed frequency or interval moves next_due_date one new period past
        the stored due date, unless next_due_date is given explicitly.
        """
        if "next_due_date" not in data and ("frequency" in data or "interval" in data):
            frequency = data.get("frequency") or recurring.frequency
            interval = int(data.get("interval") or recurring.interval)
            if frequency != recurring.frequency or interval != recurring.interval:
                day_of_month = data.get("day_of_month", recurring.day_of_month)
                data = {
                    **data,
                    "next_due_date": calculate_next_due_date(
                        frequency,
                        interval,
                        recurring.next_due_date,
                        int(day_of_month) if day_of_month else None,
                    ),
                }
        return await super().update(recurring, data)

    async def activate(self, recurring: RecurringTask) -> RecurringTask:
        return await self.update(recurring, {"is_active": True})

    async def deactivate(self, recurring: RecurringTask) -> RecurringTask:
        return await self.update(recurring, {"is_active": False})

    async def get_total_count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(RecurringTask))
        return result.scalar_one()

    async def generate_instance(self, recurring: RecurringTask) -> Task:
        """Create the task due on next_due_date from the template task, then advance.

        Raises:
            DomainInvariantException: If the schedule is inactive.
            ResourceNotFoundException: If the template task is gone.
        """
        if not recurring.is_active:
            raise DomainInvariantException(
                "Inactive recurring tasks do not generate instances.",
                "recurring_task_active",
                recurring_task_id=recurring.id,
            )
        async with atomic(self.db):
            template = await self.db.get(Task, recurring.task_id)
            if template is None:
                raise ResourceNotFoundException("Task", recurring.task_id)
            instance = Task(
                workspace_id=template.workspace_id,
                project_id=template.project_id,
                reporter_id=template.reporter_id,
                assignee_id=template.assignee_id,
                title=template.title,
                description=template.description,
                priority=template.priority,
                type=template.type,
                estimated_hours=template.estimated_hours,
                story_points=template.story_points,
                due_date=recurring.next_due_date,
                metadata_={"recurring_task_id": recurring.id},
            )
            self.db.add(instance)
            await self.db.flush()
            await self.db.refresh(instance)
            await self.advance(recurring)
        logger.info(
            "Generated task %s from recurring task %s (due %s)",
            instance.id,
            recurring.id,
            instance.due_date,
        )
        return instance
