"""Local filesystem blob store with path validation and atomic writes."""

from __future__ import annotations

import hashlib
import os
import tempfile
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from projecthub.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StorageNotSupportedError,
    StoragePermissionError,
    StorageUploadError,
)


class LocalBlobStore:
    """Blobs stored under storage_root/<disk>/<path>.

    Each disk is a subdirectory. Paths are validated against the disk root.
    Writes use temp file + rename.
    """

    DISKS = ("local", "public")

    def __init__(self, storage_root: str) -> None:
        self.storage_root = Path(storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, disk: str, path: str) -> Path:
        """Resolve and validate path under the disk root."""
        if disk not in self.DISKS:
            raise StorageNotSupportedError(disk)
        disk_root = self.storage_root / disk
        full_path = (disk_root / path).resolve()
        try:
            full_path.relative_to(disk_root.resolve())
        except ValueError as e:
            raise StoragePermissionError(path) from e
        return full_path

    async def put(
        self, disk: str, path: str, data: bytes, content_type: str | None = None
    ) -> dict[str, Any]:
        target_path = self._get_full_path(disk, path)
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_path = tempfile.mkstemp(dir=target_path.parent, prefix=".tmp_")
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(data)
                os.replace(temp_path, target_path)
            finally:
                if Path(temp_path).exists():
                    os.unlink(temp_path)
        except OSError as e:
            raise StorageUploadError(disk, path, str(e)) from e
        return {
            "disk": disk,
            "path": path,
            "size": len(data),
            "checksum": hashlib.sha256(data).hexdigest(),
            "content_type": content_type,
        }

    async def get(self, disk: str, path: str) -> bytes:
        file_path = self._get_full_path(disk, path)
        if not file_path.exists():
            raise StorageNotFoundError(disk, path)
        try:
            async with aiofiles.open(file_path, "rb") as f:
                return await f.read()
        except OSError as e:
            raise StorageDownloadError(disk, path, str(e)) from e

    async def delete(self, disk: str, path: str) -> bool:
        file_path = self._get_full_path(disk, path)
        if not file_path.exists():
            return False
        try:
            await aiofiles.os.remove(file_path)
        except OSError as e:
            raise StorageDeleteError(disk, path, str(e)) from e
        return True

    async def exists(self, disk: str, path: str) -> bool:
        return self._get_full_path(disk, path).exists()
