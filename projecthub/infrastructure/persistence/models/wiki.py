"""Wiki page and append-only wiki revision ORM models."""

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


class Wiki(WorkspaceScopedModel, Base):
    """Wiki page; parent_id forms a tree. Table: wiki. Unique (workspace_id, slug)."""

    __tablename__ = "wiki"

    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("wiki.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_by_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    metadata_: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )

    __table_args__ = (
        UniqueConstraint("workspace_id", "slug", name="uq_wiki_workspace_slug"),
    )


class WikiRevision(GlobalModel, Base):
    """Snapshot of a wiki's title and content. Table: wiki_revision."""

    __tablename__ = "wiki_revision"

    wiki_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("wiki.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str | None] = mapped_column(String(255), nullable=True)
