"""Blob-owning ORM models: attachments, media, exports and imports.

Each row references a blob by (disk, path); deleting the row also removes
the blob through the storage service.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from projecthub.infrastructure.persistence.database import Base
from projecthub.infrastructure.persistence.models.mixins import WorkspaceScopedModel


class Attachment(WorkspaceScopedModel, Base):
    """File attached to any entity via (attachable_type, attachable_id)."""

    __tablename__ = "attachment"

    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    attachable_type: Mapped[str] = mapped_column(String(64), nullable=False)
    attachable_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    disk: Mapped[str] = mapped_column(String(32), nullable=False, default="local")
    path: Mapped[str] = mapped_column(String(1024), nullable=False)
    mime_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    metadata_: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )

    __table_args__ = (
        Index("ix_attachment_attachable", "attachable_type", "attachable_id"),
    )


class Media(WorkspaceScopedModel, Base):
    """Media item owned by any entity via (model_type, model_id)."""

    __tablename__ = "media"

    model_type: Mapped[str] = mapped_column(String(64), nullable=False)
    model_id: Mapped[int] = mapped_column(Integer, nullable=False)
    collection: Mapped[str] = mapped_column(String(255), nullable=False, default="default")
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    disk: Mapped[str] = mapped_column(String(32), nullable=False, default="local")
    path: Mapped[str] = mapped_column(String(1024), nullable=False)
    mime_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    metadata_: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )

    __table_args__ = (Index("ix_media_model", "model_type", "model_id"),)


class Export(WorkspaceScopedModel, Base):
    """Data export job; file_path is set once the external worker completes it."""

    __tablename__ = "data_export"

    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    entity: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="pending", index=True
    )
    disk: Mapped[str] = mapped_column(String(32), nullable=False, default="local")
    file_path: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    filters: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    error: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class Import(WorkspaceScopedModel, Base):
    """Data import job with row progress counters."""

    __tablename__ = "data_import"

    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    entity: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="pending", index=True
    )
    disk: Mapped[str] = mapped_column(String(32), nullable=False, default="local")
    file_path: Mapped[str] = mapped_column(String(1024), nullable=False)
    original_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    total_rows: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processed_rows: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failed_rows: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    errors: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
