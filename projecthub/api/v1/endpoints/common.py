"""Helpers shared by the route modules."""

import uuid
from typing import Any

from projecthub.domain.exceptions import ResourceNotFoundException
from projecthub.shared.utils.text import slugify


async def load_or_404(repo: Any, entity_id: int, resource_type: str) -> Any:
    """Fetch by id or raise ResourceNotFoundException (404)."""
    obj = await repo.get_by_id(entity_id)
    if obj is None:
        raise ResourceNotFoundException(resource_type, entity_id)
    return obj


def blob_path(prefix: str, workspace_id: Any, filename: str) -> str:
    """Unique storage path: prefix/workspace/<hex>-<slugified name>.<ext>."""
    stem, dot, ext = filename.rpartition(".")
    if not dot:
        stem, ext = filename, ""
    safe = slugify(stem) or "file"
    suffix = f".{slugify(ext)}" if ext else ""
    return f"{prefix}/{workspace_id}/{uuid.uuid4().hex}-{safe}{suffix}"
