"""Blob store factory: creates the configured backend from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from projecthub.infrastructure.external.storage.protocol import BlobStore

if TYPE_CHECKING:
    from projecthub.core.config import Settings


class StorageFactory:
    """Factory for blob store instances based on configuration."""

    @staticmethod
    def create_blob_store(settings: "Settings | None" = None) -> BlobStore:
        """Create blob store from settings.

        Raises:
            ValueError: Unknown backend or missing storage_root.
        """
        from projecthub.core.config import get_settings

        s = settings or get_settings()
        backend = s.storage_backend.lower()
        if backend == "local":
            from projecthub.infrastructure.external.storage.local_storage import (
                LocalBlobStore,
            )

            if not s.storage_root:
                raise ValueError("STORAGE_ROOT required for local backend")
            return LocalBlobStore(storage_root=s.storage_root)
        raise ValueError(f"Unknown storage backend: {backend}. Supported: 'local'")
