"""Goal repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.domain.enums import GoalStatus
from projecthub.infrastructure.persistence.filters import FilterSpec
from projecthub.infrastructure.persistence.models.goal import Goal
from projecthub.infrastructure.persistence.repositories.base import BaseRepository


class GoalRepository(BaseRepository[Goal]):
    filter_spec = FilterSpec(
        exact=("workspace_id", "owner_id", "status"),
        search=("name", "description"),
        ranges={
            "start_date_from": ("start_date", "gte"),
            "end_date_to": ("end_date", "lte"),
        },
        order_by=(("created_at", "desc"),),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Goal)

    async def get_active(self, workspace_id: int) -> list[Goal]:
        result = await self.db.execute(
            select(Goal)
            .where(Goal.workspace_id == workspace_id, Goal.status == GoalStatus.ACTIVE.value)
            .order_by(Goal.end_date, Goal.id)
        )
        return list(result.scalars().all())

    async def update_progress(self, goal: Goal, progress: int) -> Goal:
        """Set progress clamped to 0..100; reaching 100 completes an active goal."""
        value = max(0, min(100, progress))
        data: dict[str, object] = {"progress": value}
        if value == 100 and goal.status == GoalStatus.ACTIVE.value:
            data["status"] = GoalStatus.COMPLETED.value
        return await self.update(goal, data)
