"""Filesystem storage backend served by the API under ``/files``."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

from .base import StorageError, object_name_for, public_url_for

logger = logging.getLogger(__name__)


class LocalFileStorage:
    """Write uploads to ``root/bucket/<object>`` and return a public URL."""

    def __init__(
        self,
        root: Path,
        *,
        bucket: str,
        public_url: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.root = root
        self.bucket = bucket
        self.public_url = public_url
        self._clock = clock

    @property
    def bucket_dir(self) -> Path:
        return self.root / self.bucket

    def put(self, content: bytes, filename: str, content_type: str) -> str:
        object_name = object_name_for(filename, self._clock)
        target = self.bucket_dir / object_name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = target.with_suffix(target.suffix + ".tmp")
            tmp_path.write_bytes(content)
            tmp_path.replace(target)
        except OSError as exc:
            raise StorageError(f"Unable to write {object_name}: {exc}") from exc
        logger.debug(
            "Stored object bucket=%s name=%s size=%s content_type=%s",
            self.bucket,
            object_name,
            len(content),
            content_type,
        )
        return public_url_for(self.public_url, self.bucket, object_name)


__all__ = ["LocalFileStorage"]
