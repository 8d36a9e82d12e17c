"""Custom field definition and polymorphic custom field value ORM models."""

from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from projecthub.infrastructure.persistence.database import Base
from projecthub.infrastructure.persistence.models.mixins import (
    GlobalModel,
    WorkspaceScopedModel,
)


class CustomField(WorkspaceScopedModel, Base):
    """Custom field. Table: custom_field. Unique (workspace_id, applies_to, key)."""

    __tablename__ = "custom_field"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    key: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    applies_to: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    options: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint(
            "workspace_id", "applies_to", "key", name="uq_custom_field_scope_key"
        ),
    )


class CustomFieldValue(GlobalModel, Base):
    """Value of a custom field attached to (entity_type, entity_id)."""

    __tablename__ = "custom_field_value"

    custom_field_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("custom_field.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    entity_type: Mapped[str] = mapped_column(String(255), nullable=False)
    entity_id: Mapped[int] = mapped_column(Integer, nullable=False)
    value: Mapped[Any | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        Index("ix_custom_field_value_entity", "entity_type", "entity_id"),
        UniqueConstraint(
            "custom_field_id",
            "entity_type",
            "entity_id",
            name="uq_custom_field_value_entity",
        ),
    )
