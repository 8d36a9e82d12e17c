"""Task repository: column writes plus milestone and dependency relations."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete, insert, select, update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.application.dtos.pagination import Page
from projecthub.domain.enums import DependencyType
from projecthub.domain.exceptions import DomainInvariantException
from projecthub.infrastructure.persistence.database import atomic
from projecthub.infrastructure.persistence.filters import FilterSpec
from projecthub.infrastructure.persistence.models.task import (
    Task,
    task_dependency,
    task_milestone,
)
from projecthub.infrastructure.persistence.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

RELATION_KEYS = ("milestone_ids", "dependency_ids", "dependency_types")


def pair_dependencies(
    dependency_ids: list[int], dependency_types: list[str] | None = None
) -> list[tuple[int, str]]:
    """Pair each dependency id (as int) with the type at the same index.

    Missing positions default to 'blocks'.
    """
    types = dependency_types or []
    return [
        (int(dep_id), types[i] if i < len(types) and types[i] else DependencyType.BLOCKS.value)
        for i, dep_id in enumerate(dependency_ids)
    ]


class TaskRepository(BaseRepository[Task]):
    """Task repository. Relation inputs are split from columns before writes."""

    filter_spec = FilterSpec(
        exact=(
            "workspace_id",
            "project_id",
            "status_id",
            "assignee_id",
            "reporter_id",
            "parent_id",
            "priority",
            "type",
        ),
        search=("title", "description"),
        null_checks={"has_assignee": ("assignee_id", True), "is_subtask": ("parent_id", True)},
        ranges={
            "due_before": ("due_date", "lt"),
            "due_date_from": ("due_date", "gte"),
            "due_date_to": ("due_date", "lte"),
        },
        order_by=(("order", "asc"), ("created_at", "desc")),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Task)

    async def create(self, data: dict[str, Any]) -> Task:
        """Create the task row, then attach milestones and dependency edges atomically."""
        async with atomic(self.db):
            task = await super().create(data)
            if data.get("milestone_ids"):
                await self._attach_milestones(task.id, data["milestone_ids"])
            if data.get("dependency_ids"):
                await self.add_dependencies(
                    task, data["dependency_ids"], data.get("dependency_types")
                )
        return task

    async def update(self, task: Task, data: dict[str, Any]) -> Task:
        """Update columns; provided relation inputs replace the stored ones."""
        parent_id = data.get("parent_id")
        if parent_id is not None and int(parent_id) == task.id:
            raise DomainInvariantException(
                "A task cannot be its own parent.", "task_not_own_parent", task_id=task.id
            )
        async with atomic(self.db):
            task = await super().update(task, data)
            if "milestone_ids" in data:
                await self.sync_milestones(task, data["milestone_ids"] or [])
            if "dependency_ids" in data:
                await self.db.execute(
                    delete(task_dependency).where(task_dependency.c.task_id == task.id)
                )
                if data["dependency_ids"]:
                    await self.add_dependencies(
                        task, data["dependency_ids"], data.get("dependency_types")
                    )
        return task

    async def _attach_milestones(self, task_id: int, milestone_ids: list[int]) -> None:
        unique_ids = list(dict.fromkeys(int(m) for m in milestone_ids))
        await self.db.execute(
            insert(task_milestone),
            [{"task_id": task_id, "milestone_id": m} for m in unique_ids],
        )

    async def sync_milestones(self, task: Task, milestone_ids: list[int]) -> None:
        """Make the task's milestones exactly milestone_ids."""
        await self.db.execute(delete(task_milestone).where(task_milestone.c.task_id == task.id))
        if milestone_ids:
            await self._attach_milestones(task.id, milestone_ids)

    async def add_dependencies(
        self,
        task: Task,
        dependency_ids: list[int],
        dependency_types: list[str] | None = None,
    ) -> None:
        """Attach dependency edges with positionally paired types."""
        pairs = pair_dependencies(dependency_ids, dependency_types)
        if any(dep_id == task.id for dep_id, _ in pairs):
            raise DomainInvariantException(
                "A task cannot depend on itself.", "task_dependency_not_self", task_id=task.id
            )
        existing = set(
            (
                await self.db.execute(
                    select(task_dependency.c.dependency_id).where(
                        task_dependency.c.task_id == task.id
                    )
                )
            ).scalars()
        )
        rows = []
        for dep_id, dep_type in pairs:
            if dep_id in existing:
                continue
            existing.add(dep_id)
            rows.append({"task_id": task.id, "dependency_id": dep_id, "type": dep_type})
        if rows:
            await self.db.execute(insert(task_dependency), rows)

    async def remove_dependencies(self, task: Task, dependency_ids: list[int]) -> int:
        """Detach the given dependency edges. Returns rows removed."""
        result = await self.db.execute(
            delete(task_dependency).where(
                task_dependency.c.task_id == task.id,
                task_dependency.c.dependency_id.in_(dependency_ids),
            )
        )
        return result.rowcount or 0

    async def get_dependencies(self, task: Task) -> list[tuple[int, str]]:
        """Return (dependency_id, type) edges ordered by dependency id."""
        result = await self.db.execute(
            select(task_dependency.c.dependency_id, task_dependency.c.type)
            .where(task_dependency.c.task_id == task.id)
            .order_by(task_dependency.c.dependency_id)
        )
        return [(row.dependency_id, row.type) for row in result]

    async def get_milestone_ids(self, task: Task) -> list[int]:
        result = await self.db.execute(
            select(task_milestone.c.milestone_id)
            .where(task_milestone.c.task_id == task.id)
            .order_by(task_milestone.c.milestone_id)
        )
        return list(result.scalars().all())

    async def get_subtasks(self, task: Task) -> list[Task]:
        result = await self.db.execute(
            select(Task).where(Task.parent_id == task.id).order_by(Task.order, Task.id)
        )
        return list(result.scalars().all())

    async def update_status(self, task: Task, status_id: int | None) -> Task:
        return await self.update(task, {"status_id": status_id})

    async def update_assignee(self, task: Task, assignee_id: int | None) -> Task:
        return await self.update(task, {"assignee_id": assignee_id})

    async def reorder(self, task_ids: list[int]) -> None:
        """Set order to each task's position in task_ids."""
        for position, task_id in enumerate(task_ids):
            await self.db.execute(
                sa_update(Task).where(Task.id == task_id).values(order=position)
            )
        await self.db.flush()

    async def list_by_project(
        self, project_id: int, per_page: int | None = None, page: int = 1
    ) -> Page:
        return await self.list({"project_id": project_id}, per_page=per_page, page=page)

    async def list_by_workspace(
        self, workspace_id: int, per_page: int | None = None, page: int = 1
    ) -> Page:
        return await self.list({"workspace_id": workspace_id}, per_page=per_page, page=page)

    async def list_by_assignee(
        self, assignee_id: int, per_page: int | None = None, page: int = 1
    ) -> Page:
        return await self.list({"assignee_id": assignee_id}, per_page=per_page, page=page)
