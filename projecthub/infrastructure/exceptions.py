"""Infrastructure exceptions for blob storage.

Storage errors extend ProjectHubException so presentation can map them
to HTTP responses consistently.
"""

from projecthub.domain.exceptions import ProjectHubException


class StorageException(ProjectHubException):
    """Base exception for blob store operations."""


class StorageNotFoundError(StorageException):
    """Blob not found on its disk."""

    def __init__(self, disk: str, path: str) -> None:
        super().__init__(
            f"File not found: {disk}:{path}",
            "STORAGE_NOT_FOUND",
            {"disk": disk, "path": path},
        )


class StorageUploadError(StorageException):
    """Writing a blob failed."""

    def __init__(self, disk: str, path: str, reason: str) -> None:
        super().__init__(
            f"Failed to store file: {disk}:{path}",
            "STORAGE_UPLOAD_ERROR",
            {"disk": disk, "path": path, "reason": reason},
        )


class StorageDownloadError(StorageException):
    """Reading a blob failed."""

    def __init__(self, disk: str, path: str, reason: str) -> None:
        super().__init__(
            f"Failed to read file: {disk}:{path}",
            "STORAGE_DOWNLOAD_ERROR",
            {"disk": disk, "path": path, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """Deleting a blob failed."""

    def __init__(self, disk: str, path: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {disk}:{path}",
            "STORAGE_DELETE_ERROR",
            {"disk": disk, "path": path, "reason": reason},
        )


class StorageNotSupportedError(StorageException):
    """Disk is not served by the configured backend."""

    def __init__(self, disk: str) -> None:
        super().__init__(
            f"Storage disk not supported: {disk}",
            "STORAGE_NOT_SUPPORTED",
            {"disk": disk},
        )


class StoragePermissionError(StorageException):
    """Path escapes the disk root."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Permission denied for path: {path}",
            "STORAGE_PERMISSION_ERROR",
            {"path": path},
        )
