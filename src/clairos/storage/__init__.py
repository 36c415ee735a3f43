"""Storage backends for uploaded files."""

from __future__ import annotations

from clairos.config import Settings

from .base import StorageBackend, StorageError, object_name_for, public_url_for
from .local import LocalFileStorage


def build_storage(settings: Settings) -> StorageBackend:
    """Return the storage backend selected by ``settings.storage_backend``."""

    backend = (settings.storage_backend or "local").lower()
    if backend == "local":
        return LocalFileStorage(
            settings.storage_dir,
            bucket=settings.storage_bucket,
            public_url=settings.storage_public_url,
        )
    if backend == "minio":
        from .object_store import MinioStorage

        return MinioStorage.from_settings(settings)
    raise ValueError(f"Unsupported storage backend '{settings.storage_backend}'")


__all__ = [
    "LocalFileStorage",
    "StorageBackend",
    "StorageError",
    "build_storage",
    "object_name_for",
    "public_url_for",
]
