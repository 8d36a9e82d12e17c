"""Blob-owning repositories: the row goes even when the blob cannot."""

from typing import Any

import pytest

from projecthub.infrastructure.exceptions import StorageDeleteError
from projecthub.infrastructure.persistence.repositories import (
    AttachmentRepository,
    ExportRepository,
)


class FailingBlobStore:
    """Blob store whose deletes always fail."""

    def __init__(self) -> None:
        self.delete_calls: list[tuple[str, str]] = []

    async def put(self, disk: str, path: str, data: bytes, content_type: str | None = None):
        return {"size": len(data)}

    async def get(self, disk: str, path: str) -> bytes:
        return b""

    async def delete(self, disk: str, path: str) -> bool:
        self.delete_calls.append((disk, path))
        raise StorageDeleteError(disk, path, "disk unavailable")

    async def exists(self, disk: str, path: str) -> bool:
        return True


def _attachment(ws, task, **extra: Any) -> dict[str, Any]:
    return {
        "workspace_id": ws.id,
        "attachable_type": "tasks",
        "attachable_id": task.id,
        "name": "spec.pdf",
        "original_name": "spec.pdf",
        "path": f"attachments/{ws.id}/spec.pdf",
        "size": 3,
        **extra,
    }


@pytest.mark.requires_db
async def test_delete_removes_blob_then_row(seed, db_session, blob_store) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    task = await seed.task(ws, user)
    repo = AttachmentRepository(db_session, blob_store=blob_store)
    attachment = await repo.create(_attachment(ws, task))
    await blob_store.put("local", attachment.path, b"pdf")

    assert await repo.delete(attachment) is True
    assert await blob_store.exists("local", attachment.path) is False
    assert await repo.get_by_id(attachment.id) is None


@pytest.mark.requires_db
async def test_blob_failure_does_not_block_row_delete(seed, db_session) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    task = await seed.task(ws, user)
    store = FailingBlobStore()
    repo = AttachmentRepository(db_session, blob_store=store)
    attachment = await repo.create(_attachment(ws, task))

    assert await repo.delete(attachment) is True
    assert store.delete_calls == [("local", f"attachments/{ws.id}/spec.pdf")]
    assert await repo.get_by_id(attachment.id) is None


@pytest.mark.requires_db
async def test_export_lifecycle(seed, db_session) -> None:
    ws = await seed.workspace()
    repo = ExportRepository(db_session)
    export = await repo.create({"workspace_id": ws.id, "type": "csv", "entity": "tasks"})
    assert export.status == "pending"

    await repo.mark_processing(export)
    assert [e.id for e in await repo.get_in_progress(ws.id)] == [export.id]

    done = await repo.mark_completed(export, "exports/1/tasks.csv")
    assert done.status == "completed"
    assert done.file_path == "exports/1/tasks.csv"
    assert done.completed_at is not None
    assert await repo.get_in_progress(ws.id) == []
