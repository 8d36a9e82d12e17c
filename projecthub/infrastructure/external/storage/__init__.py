"""Blob storage: protocol, local filesystem backend and factory."""

from projecthub.infrastructure.external.storage.factory import StorageFactory
from projecthub.infrastructure.external.storage.local_storage import LocalBlobStore
from projecthub.infrastructure.external.storage.protocol import BlobStore

__all__ = ["BlobStore", "LocalBlobStore", "StorageFactory"]
