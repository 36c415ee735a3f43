"""Storage backend contract shared by the upload gateway."""

from __future__ import annotations

import re
import time
from typing import Callable, Protocol

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class StorageError(RuntimeError):
    """Raised when a storage backend cannot persist an object."""


class StorageBackend(Protocol):
    """Persist bytes and return the public URL of the stored object."""

    def put(self, content: bytes, filename: str, content_type: str) -> str:
        ...


def object_name_for(filename: str, clock: Callable[[], float] = time.time) -> str:
    """Return a unique, path-safe object key: ``"{epoch_ms}-{filename}"``."""

    base = filename.replace("\\", "/").rsplit("/", 1)[-1]
    safe = _UNSAFE_CHARS.sub("_", base).strip("._") or "upload"
    return f"{int(clock() * 1000)}-{safe}"


def public_url_for(public_url: str, bucket: str, object_name: str) -> str:
    return f"{public_url.rstrip('/')}/{bucket}/{object_name}"


__all__ = ["StorageBackend", "StorageError", "object_name_for", "public_url_for"]
