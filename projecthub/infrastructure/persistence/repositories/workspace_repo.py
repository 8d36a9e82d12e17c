"""Workspace, user, project, status and milestone repositories."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.infrastructure.persistence.filters import FilterSpec
from projecthub.infrastructure.persistence.models.project import (
    Milestone,
    Project,
    Status,
)
from projecthub.infrastructure.persistence.models.workspace import User, Workspace
from projecthub.infrastructure.persistence.repositories.base import BaseRepository


class WorkspaceRepository(BaseRepository[Workspace]):
    filter_spec = FilterSpec(exact=("slug",), search=("name",), order_by=(("name", "asc"),))

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Workspace)


class UserRepository(BaseRepository[User]):
    filter_spec = FilterSpec(
        exact=("email", "is_admin"), search=("name", "email"), order_by=(("name", "asc"),)
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()


class ProjectRepository(BaseRepository[Project]):
    filter_spec = FilterSpec(
        exact=("workspace_id",),
        search=("name", "description"),
        order_by=(("created_at", "desc"),),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Project)


class StatusRepository(BaseRepository[Status]):
    filter_spec = FilterSpec(
        exact=("workspace_id",),
        search=("name",),
        order_by=(("order", "asc"), ("created_at", "desc")),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Status)


class MilestoneRepository(BaseRepository[Milestone]):
    filter_spec = FilterSpec(
        exact=("workspace_id", "project_id"),
        search=("name",),
        order_by=(("order", "asc"), ("created_at", "desc")),
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Milestone)
