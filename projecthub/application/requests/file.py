"""Requests for blob-backed records: attachments, media, exports, imports."""

from __future__ import annotations

from typing import Any

from projecthub.application.requests.base import ValidatedRequest
from projecthub.application.validation.rules import (
    After,
    Exists,
    In,
    IsType,
    Max,
    Min,
    Nullable,
    Required,
    Rule,
    RuleContext,
    Sometimes,
    is_empty,
)
from projecthub.domain.enums import DataEntity, ExportFormat, JobStatus

DISKS = ("local", "public")

FILTER_OPERATORS = ("=", "!=", ">", "<", ">=", "<=", "like", "in", "not_in")

IMPORT_FORMATS = (ExportFormat.CSV, ExportFormat.JSON, ExportFormat.EXCEL)

IMPORT_MIME_TYPES: dict[str, tuple[str, ...]] = {
    "csv": ("text/csv", "application/csv"),
    "excel": (
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ),
    "json": ("application/json",),
}

IMPORT_MAX_KILOBYTES = 10240

MESSAGES = {
    "name.required": "The file name is required.",
    "original_name.required": "The original file name is required.",
    "path.required": "The file path is required.",
    "mime_type.required": "The MIME type is required.",
    "size.required": "The file size is required.",
    "size.integer": "The file size must be a valid number.",
    "workspace_id.required": "Workspace is required.",
    "workspace_id.exists": "Selected workspace does not exist.",
    "export.type.in": "Export type must be csv, json, excel, or pdf.",
    "import.type.in": "Import type must be csv, json, or excel.",
    "entity.required": "Entity type is required.",
    "entity.in": "Entity must be tasks, projects, or users.",
    "expires_at.after": "Expiration date must be in the future.",
    "file.required": "Import file is required.",
    "file.max": "File size cannot exceed 10MB.",
    "status.in": "Status must be pending, processing, completed, or failed.",
}


def _blob_rules() -> dict[str, list[Rule]]:
    return {
        "name": [Required(message=MESSAGES["name.required"]), IsType("string"), Max(255)],
        "original_name": [
            Required(message=MESSAGES["original_name.required"]),
            IsType("string"),
            Max(255),
        ],
        "path": [Required(message=MESSAGES["path.required"]), IsType("string"), Max(500)],
        "disk": [Sometimes(), IsType("string"), In(DISKS)],
        "mime_type": [
            Required(message=MESSAGES["mime_type.required"]),
            IsType("string"),
            Max(255),
        ],
        "size": [
            Required(message=MESSAGES["size.required"]),
            IsType("integer", message=MESSAGES["size.integer"]),
            Min(0),
        ],
        "metadata": [Sometimes(), IsType("object")],
    }


def _invalid(key: str) -> str:
    return f"The selected {key.replace('_', ' ')} is invalid."


class _PolymorphicOwnerRequest(ValidatedRequest):
    """The (type, id) pair must name a registered entity that exists."""

    type_key = "attachable_type"
    id_key = "attachable_id"

    async def after(self) -> None:
        entities = self.context.entities
        if entities is None or self.has_error(self.type_key) or self.has_error(self.id_key):
            return
        tag = self.data.get(self.type_key)
        entity_id = self.data.get(self.id_key)
        if not isinstance(tag, str) or is_empty(entity_id):
            return
        if not entities.is_known(tag):
            self.add_error(self.type_key, _invalid(self.type_key))
        elif not await entities.exists(tag, int(entity_id)):
            self.add_error(self.id_key, _invalid(self.id_key))


class CreateAttachmentRequest(_PolymorphicOwnerRequest):
    def prepare(self) -> None:
        actor = self.context.actor
        if actor is not None:
            self.data["user_id"] = actor.user_id
        self.data.setdefault("disk", "local")

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [Required(), IsType("integer"), Exists("workspace")],
            "user_id": [Nullable(), IsType("integer"), Exists("app_user")],
            "attachable_type": [Required(), IsType("string"), Max(255)],
            "attachable_id": [Required(), IsType("integer"), Min(1)],
            **_blob_rules(),
        }


class CreateMediaRequest(_PolymorphicOwnerRequest):
    type_key = "model_type"
    id_key = "model_id"

    def prepare(self) -> None:
        self.data.setdefault("disk", "local")
        self.data.setdefault("collection", "default")

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [Required(), IsType("integer"), Exists("workspace")],
            "model_type": [Required(), IsType("string"), Max(255)],
            "model_id": [Required(), IsType("integer"), Min(1)],
            "collection": [Sometimes(), IsType("string"), Max(255)],
            **_blob_rules(),
        }


class _Present(Rule):
    """Key must exist; null is an acceptable value."""

    implicit = True

    def check(self, ctx: RuleContext) -> str | None:
        if ctx.present:
            return None
        return self._msg(f"The {ctx.attribute} field must be present.")


class CreateExportRequest(ValidatedRequest):
    def prepare(self) -> None:
        actor = self.context.actor
        if actor is not None:
            self.data["user_id"] = actor.user_id
        self.data["status"] = JobStatus.PENDING.value

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [
                Required(message=MESSAGES["workspace_id.required"]),
                IsType("integer"),
                Exists("workspace", message=MESSAGES["workspace_id.exists"]),
            ],
            "user_id": [Nullable(), IsType("integer")],
            "status": [Required()],
            "type": [
                Required(),
                IsType("string"),
                In(ExportFormat.values(), message=MESSAGES["export.type.in"]),
            ],
            "entity": [
                Required(message=MESSAGES["entity.required"]),
                IsType("string"),
                In(DataEntity.values(), message=MESSAGES["entity.in"]),
            ],
            "filters": [Sometimes(), IsType("array")],
            "filters.*.field": [Required(), IsType("string")],
            "filters.*.operator": [Required(), IsType("string"), In(FILTER_OPERATORS)],
            "filters.*.value": [_Present()],
            "expires_at": [
                Sometimes(),
                IsType("date"),
                After("now", message=MESSAGES["expires_at.after"]),
            ],
        }


def _upload_attr(upload: Any, name: str) -> Any:
    if isinstance(upload, dict):
        return upload.get(name)
    return getattr(upload, name, None)


class CreateImportRequest(ValidatedRequest):
    """The uploaded file is stored by the caller after validation passes."""

    def prepare(self) -> None:
        actor = self.context.actor
        if actor is not None:
            self.data["user_id"] = actor.user_id

    def rules(self) -> dict[str, list[Rule]]:
        return {
            "workspace_id": [
                Required(message=MESSAGES["workspace_id.required"]),
                IsType("integer"),
                Exists("workspace", message=MESSAGES["workspace_id.exists"]),
            ],
            "user_id": [Nullable(), IsType("integer")],
            "type": [
                Required(),
                IsType("string"),
                In(IMPORT_FORMATS, message=MESSAGES["import.type.in"]),
            ],
            "entity": [
                Required(message=MESSAGES["entity.required"]),
                IsType("string"),
                In(DataEntity.values(), message=MESSAGES["entity.in"]),
            ],
            "file": [
                Required(message=MESSAGES["file.required"]),
                IsType("file"),
                Max(IMPORT_MAX_KILOBYTES, message=MESSAGES["file.max"]),
            ],
            "total_rows": [Sometimes(), IsType("integer"), Min(0)],
        }

    async def after(self) -> None:
        if self.has_error("file") or self.has_error("type"):
            return
        file_type = self.data.get("type")
        mime = _upload_attr(self.data.get("file"), "content_type")
        if mime not in IMPORT_MIME_TYPES.get(str(file_type), ()):
            self.add_error("file", f"The file must be a valid {file_type} file.")


class UpdateImportRequest(ValidatedRequest):
    def rules(self) -> dict[str, list[Rule]]:
        return {
            "status": [
                Sometimes(),
                IsType("string"),
                In(JobStatus.values(), message=MESSAGES["status.in"]),
            ],
            "total_rows": [Sometimes(), IsType("integer"), Min(0)],
            "processed_rows": [Sometimes(), IsType("integer"), Min(0)],
            "failed_rows": [Sometimes(), IsType("integer"), Min(0)],
            "errors": [Sometimes(), IsType("array")],
        }
