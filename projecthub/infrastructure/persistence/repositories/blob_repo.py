"""Repositories for rows that own a blob: attachments, media, exports, imports.

delete() removes the blob first and then the row. A blob that cannot be
removed is logged and left behind; the row delete still goes ahead.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.domain.enums import JobStatus
from projecthub.infrastructure.exceptions import StorageException
from projecthub.infrastructure.external.storage.protocol import BlobStore
from projecthub.infrastructure.persistence.database import Base
from projecthub.infrastructure.persistence.filters import FilterSpec
from projecthub.infrastructure.persistence.models.file import (
    Attachment,
    Export,
    Import,
    Media,
)
from projecthub.infrastructure.persistence.repositories.base import BaseRepository, ModelType
from projecthub.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class BlobOwningRepository(BaseRepository[ModelType]):
    """Base for repositories whose rows reference a blob by (disk, path_attribute)."""

    path_attribute = "path"

    def __init__(
        self, db: AsyncSession, model: type[ModelType], blob_store: BlobStore | None = None
    ) -> None:
        super().__init__(db, model)
        self.blob_store = blob_store

    async def delete(self, obj: ModelType) -> bool:
        """Remove the blob (best effort), then the row."""
        path = getattr(obj, self.path_attribute, None)
        disk = getattr(obj, "disk", "local")
        if path and self.blob_store is not None:
            try:
                await self.blob_store.delete(disk, path)
            except (StorageException, OSError) as e:
                logger.warning(
                    "Could not delete blob %s:%s for %s %s: %s",
                    disk,
                    path,
                    self.model.__name__,
                    getattr(obj, "id", None),
                    e,
                )
        return await super().delete(obj)


class AttachmentRepository(BlobOwningRepository[Attachment]):
    filter_spec = FilterSpec(
        exact=("workspace_id", "attachable_type", "attachable_id", "user_id", "disk"),
        search=("name", "original_name"),
        like={"mime_type": "mime_type"},
        order_by=(("created_at", "desc"),),
    )

    def __init__(self, db: AsyncSession, blob_store: BlobStore | None = None) -> None:
        super().__init__(db, Attachment, blob_store)

    async def get_for(self, attachable_type: str, attachable_id: int) -> list[Attachment]:
        result = await self.db.execute(
            select(Attachment)
            .where(
                Attachment.attachable_type == attachable_type,
                Attachment.attachable_id == attachable_id,
            )
            .order_by(Attachment.created_at.desc(), Attachment.id.desc())
        )
        return list(result.scalars().all())


class MediaRepository(BlobOwningRepository[Media]):
    filter_spec = FilterSpec(
        exact=("workspace_id", "model_type", "model_id", "collection", "disk"),
        search=("name", "original_name"),
        like={"mime_type": "mime_type"},
        order_by=(("created_at", "desc"),),
    )

    def __init__(self, db: AsyncSession, blob_store: BlobStore | None = None) -> None:
        super().__init__(db, Media, blob_store)

    async def get_for(
        self, model_type: str, model_id: int, collection: str | None = None
    ) -> list[Media]:
        stmt = select(Media).where(Media.model_type == model_type, Media.model_id == model_id)
        if collection:
            stmt = stmt.where(Media.collection == collection)
        result = await self.db.execute(stmt.order_by(Media.id))
        return list(result.scalars().all())


class _JobRepository(BlobOwningRepository[ModelType]):
    """Shared status transitions for export and import jobs."""

    path_attribute = "file_path"

    async def get_in_progress(self, workspace_id: int | None = None) -> list[ModelType]:
        """Pending and processing jobs, oldest first."""
        model: Any = self.model
        stmt = select(self.model).where(
            model.status.in_([JobStatus.PENDING.value, JobStatus.PROCESSING.value])
        )
        if workspace_id is not None:
            stmt = stmt.where(model.workspace_id == workspace_id)
        result = await self.db.execute(stmt.order_by(model.created_at, model.id))
        return list(result.scalars().all())

    async def mark_processing(self, job: ModelType) -> ModelType:
        return await self.update(job, {"status": JobStatus.PROCESSING.value})

    async def mark_failed(self, job: ModelType, error: str) -> ModelType:
        logger.warning("%s %s failed: %s", self.model.__name__, getattr(job, "id", None), error)
        return await self.update(job, self._failure_values(job, error))

    def _failure_values(self, job: ModelType, error: str) -> dict[str, Any]:
        return {"status": JobStatus.FAILED.value, "completed_at": utc_now()}


class ExportRepository(_JobRepository[Export]):
    filter_spec = FilterSpec(
        exact=("workspace_id", "user_id", "type", "entity", "status"),
        order_by=(("created_at", "desc"),),
    )

    def __init__(self, db: AsyncSession, blob_store: BlobStore | None = None) -> None:
        super().__init__(db, Export, blob_store)

    async def mark_completed(self, job: Export, file_path: str) -> Export:
        return await self.update(
            job,
            {
                "status": JobStatus.COMPLETED.value,
                "file_path": file_path,
                "completed_at": utc_now(),
            },
        )

    def _failure_values(self, job: Export, error: str) -> dict[str, Any]:
        return {**super()._failure_values(job, error), "error": error[:1024]}


class ImportRepository(_JobRepository[Import]):
    filter_spec = FilterSpec(
        exact=("workspace_id", "user_id", "type", "entity", "status"),
        order_by=(("created_at", "desc"),),
    )

    def __init__(self, db: AsyncSession, blob_store: BlobStore | None = None) -> None:
        super().__init__(db, Import, blob_store)

    async def update_progress(
        self,
        job: Import,
        processed_rows: int,
        failed_rows: int = 0,
        errors: list[str] | None = None,
    ) -> Import:
        data: dict[str, Any] = {"processed_rows": processed_rows, "failed_rows": failed_rows}
        if errors:
            data["errors"] = [*(job.errors or []), *errors]
        return await self.update(job, data)

    async def mark_completed(self, job: Import) -> Import:
        return await self.update(
            job, {"status": JobStatus.COMPLETED.value, "completed_at": utc_now()}
        )

    def _failure_values(self, job: Import, error: str) -> dict[str, Any]:
        return {**super()._failure_values(job, error), "errors": [*(job.errors or []), error]}
