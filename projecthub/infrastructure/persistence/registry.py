"""Polymorphic type registry: entity tags to ORM models.

Attachments, media and custom field values point at "any entity" through an
(entity_type, entity_id) pair. The registry is the closed set of tags those
pairs may use and resolves them to rows.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.infrastructure.persistence.database import Base
from projecthub.infrastructure.persistence.models import (
    Event,
    Goal,
    Milestone,
    Project,
    Task,
    User,
    Wiki,
    Workspace,
)


class PolymorphicRegistry:
    """Maps tags such as 'tasks' to the model that backs them."""

    def __init__(self, models: dict[str, type[Base]] | None = None) -> None:
        self._models: dict[str, type[Base]] = dict(models or {})

    def register(self, tag: str, model: type[Base]) -> None:
        self._models[tag] = model

    def tags(self) -> list[str]:
        return sorted(self._models)

    def is_known(self, tag: str) -> bool:
        return tag in self._models

    def model_for(self, tag: str) -> type[Base] | None:
        return self._models.get(tag)

    async def load(self, db: AsyncSession, tag: str, entity_id: int) -> Any | None:
        """Return the row for (tag, entity_id), or None if tag or row is unknown."""
        model: Any = self._models.get(tag)
        if model is None:
            return None
        result = await db.execute(select(model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def exists(self, db: AsyncSession, tag: str, entity_id: int) -> bool:
        return await self.load(db, tag, entity_id) is not None

    def bind(self, db: AsyncSession) -> SessionEntityResolver:
        """Resolver over this registry that queries through db."""
        return SessionEntityResolver(self, db)


class SessionEntityResolver:
    """A registry bound to one session; used by request validation."""

    def __init__(self, registry: PolymorphicRegistry, db: AsyncSession) -> None:
        self.registry = registry
        self.db = db

    def is_known(self, tag: str) -> bool:
        return self.registry.is_known(tag)

    async def exists(self, tag: str, entity_id: int) -> bool:
        return await self.registry.exists(self.db, tag, entity_id)


default_registry = PolymorphicRegistry(
    {
        "tasks": Task,
        "projects": Project,
        "milestones": Milestone,
        "wikis": Wiki,
        "goals": Goal,
        "events": Event,
        "users": User,
        "workspaces": Workspace,
    }
)
