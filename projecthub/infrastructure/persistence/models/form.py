"""Form (field schema owner) and form response ORM models."""

from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
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


class Form(WorkspaceScopedModel, Base):
    """Form definition. fields is an ordered list of {name, type, label, required, options}."""

    __tablename__ = "form"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    fields: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    settings: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("workspace_id", "slug", name="uq_form_workspace_slug"),
    )


class FormResponse(GlobalModel, Base):
    """Submitted answers keyed by form field name. Table: form_response."""

    __tablename__ = "form_response"

    form_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("form.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
