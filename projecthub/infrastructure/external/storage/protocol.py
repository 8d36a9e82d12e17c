"""Blob store protocol (DIP). Implementation: LocalBlobStore."""

from typing import Any, Protocol


class BlobStore(Protocol):
    """Opaque blob store addressed by (disk, path)."""

    async def put(
        self, disk: str, path: str, data: bytes, content_type: str | None = None
    ) -> dict[str, Any]:
        """Store data at disk:path (overwrites). Returns size and checksum."""
        ...

    async def get(self, disk: str, path: str) -> bytes:
        """Return the blob content. Raises StorageNotFoundError if absent."""
        ...

    async def delete(self, disk: str, path: str) -> bool:
        """Delete the blob. Returns True if deleted, False if not found."""
        ...

    async def exists(self, disk: str, path: str) -> bool:
        """Return True if the blob exists."""
        ...
