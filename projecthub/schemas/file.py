"""Attachment, media, export and import API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from projecthub.schemas.common import Timestamped, metadata_field


class AttachmentResponse(Timestamped):
    workspace_id: int
    user_id: int | None = None
    attachable_type: str
    attachable_id: int
    name: str
    original_name: str
    disk: str
    path: str
    mime_type: str | None = None
    size: int
    metadata: dict[str, Any] | None = metadata_field()


class MediaResponse(Timestamped):
    workspace_id: int
    model_type: str
    model_id: int
    collection: str
    name: str
    original_name: str
    disk: str
    path: str
    mime_type: str | None = None
    size: int
    metadata: dict[str, Any] | None = metadata_field()


class ExportResponse(Timestamped):
    workspace_id: int
    user_id: int | None = None
    type: str
    entity: str
    status: str
    file_path: str | None = None
    filters: list[dict[str, Any]] | None = None
    error: str | None = None
    completed_at: datetime | None = None
    expires_at: datetime | None = None


class ImportResponse(Timestamped):
    workspace_id: int
    user_id: int | None = None
    type: str
    entity: str
    status: str
    file_path: str
    original_name: str | None = None
    total_rows: int
    processed_rows: int
    failed_rows: int
    errors: list[str] | None = None
    completed_at: datetime | None = None


class ExportCompletion(BaseModel):
    file_path: str = Field(min_length=1, max_length=1024)


class JobFailure(BaseModel):
    error: str = Field(min_length=1)
