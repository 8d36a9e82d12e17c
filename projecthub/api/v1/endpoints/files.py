"""Blob-backed records: attachments, media, data exports and data imports.

Uploads are validated first, then written to the blob store, then recorded.
Deleting a record removes its blob before the row.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, File, Form, Request, UploadFile
from fastapi.responses import Response

from projecthub.api.v1.dependencies import (
    Attachments,
    Blobs,
    CurrentActor,
    Exports,
    Gate,
    Imports,
    Listing,
    MediaItems,
    Validation,
)
from projecthub.api.v1.endpoints.common import blob_path, load_or_404
from projecthub.application.requests import (
    CreateAttachmentRequest,
    CreateExportRequest,
    CreateImportRequest,
    CreateMediaRequest,
    UpdateImportRequest,
)
from projecthub.core.limiter import limit_upload, limit_writes
from projecthub.domain.enums import JobStatus
from projecthub.domain.exceptions import DomainInvariantException
from projecthub.schemas.common import DeletedResponse, PageResponse
from projecthub.schemas.file import (
    AttachmentResponse,
    ExportCompletion,
    ExportResponse,
    ImportResponse,
    JobFailure,
    MediaResponse,
)

logger = logging.getLogger(__name__)

attachments_router = APIRouter()
media_router = APIRouter()
exports_router = APIRouter()
imports_router = APIRouter()

DEFAULT_MIME_TYPE = "application/octet-stream"


def _upload_fields(
    prefix: str, workspace_id: int | None, file: UploadFile, content: bytes, disk: str | None
) -> dict[str, Any]:
    original = file.filename or ""
    return {
        "workspace_id": workspace_id,
        "name": original.rsplit("/", 1)[-1],
        "original_name": original,
        "path": blob_path(prefix, workspace_id, original) if original else None,
        "disk": disk or "local",
        "mime_type": file.content_type or DEFAULT_MIME_TYPE,
        "size": len(content),
    }


async def _download(blobs: Blobs, disk: str, path: str, media_type: str | None, name: str):
    content = await blobs.get(disk, path)
    return Response(
        content=content,
        media_type=media_type or DEFAULT_MIME_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{name}"'},
    )


# Attachments


@attachments_router.get("", response_model=PageResponse[AttachmentResponse])
async def list_attachments(listing: Listing, repo: Attachments):
    """List attachments. Filters: workspace_id, user_id, attachable_type, attachable_id."""
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, AttachmentResponse)


@attachments_router.post("", response_model=AttachmentResponse, status_code=201)
@limit_upload
async def upload_attachment(
    request: Request,
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Attachments,
    blobs: Blobs,
    file: UploadFile = File(...),
    workspace_id: int | None = Form(None),
    attachable_type: str | None = Form(None),
    attachable_id: int | None = Form(None),
    disk: str | None = Form(None),
):
    """Attach an uploaded file to an entity identified by (attachable_type, attachable_id)."""
    content = await file.read()
    body = {
        **_upload_fields("attachments", workspace_id, file, content, disk),
        "attachable_type": attachable_type,
        "attachable_id": attachable_id,
    }
    data = await CreateAttachmentRequest(body, context).validate()
    gate.authorize(actor, "create", "attachment")
    await blobs.put(data["disk"], data["path"], content, data["mime_type"])
    return AttachmentResponse.model_validate(await repo.create(data))


@attachments_router.get(
    "/for/{attachable_type}/{attachable_id}", response_model=list[AttachmentResponse]
)
async def attachments_for(attachable_type: str, attachable_id: int, repo: Attachments):
    items = await repo.get_for(attachable_type, attachable_id)
    return [AttachmentResponse.model_validate(a) for a in items]


@attachments_router.get("/{attachment_id}", response_model=AttachmentResponse)
async def get_attachment(attachment_id: int, repo: Attachments):
    return AttachmentResponse.model_validate(
        await load_or_404(repo, attachment_id, "Attachment")
    )


@attachments_router.get("/{attachment_id}/download")
async def download_attachment(attachment_id: int, repo: Attachments, blobs: Blobs):
    attachment = await load_or_404(repo, attachment_id, "Attachment")
    return await _download(
        blobs, attachment.disk, attachment.path, attachment.mime_type, attachment.original_name
    )


@attachments_router.delete("/{attachment_id}", response_model=DeletedResponse)
@limit_writes
async def delete_attachment(
    request: Request, attachment_id: int, actor: CurrentActor, gate: Gate, repo: Attachments
):
    attachment = await load_or_404(repo, attachment_id, "Attachment")
    gate.authorize(actor, "delete", attachment)
    return DeletedResponse(deleted=await repo.delete(attachment))


# Media


@media_router.get("", response_model=PageResponse[MediaResponse])
async def list_media(listing: Listing, repo: MediaItems):
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, MediaResponse)


@media_router.post("", response_model=MediaResponse, status_code=201)
@limit_upload
async def upload_media(
    request: Request,
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: MediaItems,
    blobs: Blobs,
    file: UploadFile = File(...),
    workspace_id: int | None = Form(None),
    model_type: str | None = Form(None),
    model_id: int | None = Form(None),
    collection: str | None = Form(None),
    disk: str | None = Form(None),
):
    content = await file.read()
    body = {
        **_upload_fields("media", workspace_id, file, content, disk),
        "model_type": model_type,
        "model_id": model_id,
    }
    if collection:
        body["collection"] = collection
    data = await CreateMediaRequest(body, context).validate()
    gate.authorize(actor, "create", "media")
    await blobs.put(data["disk"], data["path"], content, data["mime_type"])
    return MediaResponse.model_validate(await repo.create(data))


@media_router.get("/for/{model_type}/{model_id}", response_model=list[MediaResponse])
async def media_for(
    model_type: str, model_id: int, repo: MediaItems, collection: str | None = None
):
    items = await repo.get_for(model_type, model_id, collection)
    return [MediaResponse.model_validate(m) for m in items]


@media_router.get("/{media_id}", response_model=MediaResponse)
async def get_media(media_id: int, repo: MediaItems):
    return MediaResponse.model_validate(await load_or_404(repo, media_id, "Media"))


@media_router.get("/{media_id}/download")
async def download_media(media_id: int, repo: MediaItems, blobs: Blobs):
    item = await load_or_404(repo, media_id, "Media")
    return await _download(blobs, item.disk, item.path, item.mime_type, item.original_name)


@media_router.delete("/{media_id}", response_model=DeletedResponse)
@limit_writes
async def delete_media(
    request: Request, media_id: int, actor: CurrentActor, gate: Gate, repo: MediaItems
):
    item = await load_or_404(repo, media_id, "Media")
    gate.authorize(actor, "delete", item)
    return DeletedResponse(deleted=await repo.delete(item))


# Exports


@exports_router.get("", response_model=PageResponse[ExportResponse])
async def list_exports(listing: Listing, repo: Exports):
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, ExportResponse)


@exports_router.get("/in-progress", response_model=list[ExportResponse])
async def exports_in_progress(repo: Exports, workspace_id: int | None = None):
    return [ExportResponse.model_validate(e) for e in await repo.get_in_progress(workspace_id)]


@exports_router.post("", response_model=ExportResponse, status_code=201)
@limit_writes
async def request_export(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Exports,
):
    """Queue an export; an external worker produces the file."""
    data = await CreateExportRequest(body, context).validate()
    gate.authorize(actor, "create", "data_export")
    return ExportResponse.model_validate(await repo.create(data))


@exports_router.get("/{export_id}", response_model=ExportResponse)
async def get_export(export_id: int, repo: Exports):
    return ExportResponse.model_validate(await load_or_404(repo, export_id, "Export"))


@exports_router.get("/{export_id}/download")
async def download_export(export_id: int, repo: Exports, blobs: Blobs):
    job = await load_or_404(repo, export_id, "Export")
    if job.status != JobStatus.COMPLETED.value or not job.file_path:
        raise DomainInvariantException(
            "Export is not ready for download", "export_completed", export_id=job.id
        )
    name = job.file_path.rsplit("/", 1)[-1]
    return await _download(blobs, job.disk, job.file_path, None, name)


@exports_router.post("/{export_id}/processing", response_model=ExportResponse)
@limit_writes
async def export_processing(
    request: Request, export_id: int, actor: CurrentActor, gate: Gate, repo: Exports
):
    job = await load_or_404(repo, export_id, "Export")
    gate.authorize(actor, "update", job)
    return ExportResponse.model_validate(await repo.mark_processing(job))


@exports_router.post("/{export_id}/completed", response_model=ExportResponse)
@limit_writes
async def export_completed(
    request: Request,
    export_id: int,
    body: ExportCompletion,
    actor: CurrentActor,
    gate: Gate,
    repo: Exports,
):
    job = await load_or_404(repo, export_id, "Export")
    gate.authorize(actor, "update", job)
    return ExportResponse.model_validate(await repo.mark_completed(job, body.file_path))


@exports_router.post("/{export_id}/failed", response_model=ExportResponse)
@limit_writes
async def export_failed(
    request: Request,
    export_id: int,
    body: JobFailure,
    actor: CurrentActor,
    gate: Gate,
    repo: Exports,
):
    job = await load_or_404(repo, export_id, "Export")
    gate.authorize(actor, "update", job)
    return ExportResponse.model_validate(await repo.mark_failed(job, body.error))


@exports_router.delete("/{export_id}", response_model=DeletedResponse)
@limit_writes
async def delete_export(
    request: Request, export_id: int, actor: CurrentActor, gate: Gate, repo: Exports
):
    job = await load_or_404(repo, export_id, "Export")
    gate.authorize(actor, "delete", job)
    return DeletedResponse(deleted=await repo.delete(job))


# Imports


@imports_router.get("", response_model=PageResponse[ImportResponse])
async def list_imports(listing: Listing, repo: Imports):
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, ImportResponse)


@imports_router.get("/in-progress", response_model=list[ImportResponse])
async def imports_in_progress(repo: Imports, workspace_id: int | None = None):
    return [ImportResponse.model_validate(i) for i in await repo.get_in_progress(workspace_id)]


@imports_router.post("", response_model=ImportResponse, status_code=201)
@limit_upload
async def upload_import(
    request: Request,
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Imports,
    blobs: Blobs,
    file: UploadFile = File(...),
    workspace_id: int | None = Form(None),
    type: str | None = Form(None),
    entity: str | None = Form(None),
):
    """Upload a csv, json or excel file to import; an external worker processes it."""
    body = {"workspace_id": workspace_id, "type": type, "entity": entity, "file": file}
    data = await CreateImportRequest(body, context).validate()
    gate.authorize(actor, "create", "data_import")
    original = file.filename or "import"
    path = blob_path("imports", workspace_id, original)
    await blobs.put("local", path, await file.read(), file.content_type)
    data.pop("file")
    job = await repo.create(
        {
            **data,
            "disk": "local",
            "file_path": path,
            "original_name": original,
            "status": JobStatus.PENDING.value,
        }
    )
    logger.info("Queued %s import %s for workspace %s", job.type, job.id, job.workspace_id)
    return ImportResponse.model_validate(job)


@imports_router.get("/{import_id}", response_model=ImportResponse)
async def get_import(import_id: int, repo: Imports):
    return ImportResponse.model_validate(await load_or_404(repo, import_id, "Import"))


@imports_router.patch("/{import_id}", response_model=ImportResponse)
@limit_writes
async def update_import(
    request: Request,
    import_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Imports,
):
    """Progress updates from the import worker."""
    job = await load_or_404(repo, import_id, "Import")
    data = await UpdateImportRequest(body, context, current=job).validate()
    gate.authorize(actor, "update", job)
    return ImportResponse.model_validate(await repo.update(job, data))


@imports_router.post("/{import_id}/processing", response_model=ImportResponse)
@limit_writes
async def import_processing(
    request: Request, import_id: int, actor: CurrentActor, gate: Gate, repo: Imports
):
    job = await load_or_404(repo, import_id, "Import")
    gate.authorize(actor, "update", job)
    return ImportResponse.model_validate(await repo.mark_processing(job))


@imports_router.post("/{import_id}/completed", response_model=ImportResponse)
@limit_writes
async def import_completed(
    request: Request, import_id: int, actor: CurrentActor, gate: Gate, repo: Imports
):
    job = await load_or_404(repo, import_id, "Import")
    gate.authorize(actor, "update", job)
    return ImportResponse.model_validate(await repo.mark_completed(job))


@imports_router.post("/{import_id}/failed", response_model=ImportResponse)
@limit_writes
async def import_failed(
    request: Request,
    import_id: int,
    body: JobFailure,
    actor: CurrentActor,
    gate: Gate,
    repo: Imports,
):
    job = await load_or_404(repo, import_id, "Import")
    gate.authorize(actor, "update", job)
    return ImportResponse.model_validate(await repo.mark_failed(job, body.error))


@imports_router.delete("/{import_id}", response_model=DeletedResponse)
@limit_writes
async def delete_import(
    request: Request, import_id: int, actor: CurrentActor, gate: Gate, repo: Imports
):
    job = await load_or_404(repo, import_id, "Import")
    gate.authorize(actor, "delete", job)
    return DeletedResponse(deleted=await repo.delete(job))
