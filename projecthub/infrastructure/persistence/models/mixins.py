"""SQLAlchemy mixins for common model patterns.

Provides: IntegerIdMixin, WorkspaceMixin, TimestampMixin and the combined
WorkspaceScopedModel used by nearly every entity.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func


class IntegerIdMixin:
    """Mixin for an autoincrementing integer surrogate key."""

    @declared_attr
    def id(cls) -> Mapped[int]:
        return mapped_column(Integer, primary_key=True, autoincrement=True)


class WorkspaceMixin:
    """Mixin for workspace-scoped models. workspace_id FK with CASCADE delete."""

    @declared_attr
    def workspace_id(cls) -> Mapped[int]:
        return mapped_column(
            Integer,
            ForeignKey("workspace.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class WorkspaceScopedModel(IntegerIdMixin, WorkspaceMixin, TimestampMixin):
    """Combined mixin: integer id + workspace_id + created_at/updated_at."""

    __abstract__ = True


class GlobalModel(IntegerIdMixin, TimestampMixin):
    """Combined mixin for rows that are not workspace scoped."""

    __abstract__ = True
