"""Authenticated pass-through from an uploaded payload to the storage backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from clairos import metrics
from clairos.auth.sessions import SessionResolver
from clairos.models.session import UserSession
from clairos.storage.base import StorageBackend

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "upload"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class UploadError(Exception):
    """Base class for upload failures; ``message`` is safe to show to callers."""

    status_code = 500
    message = "Upload failed"


class Unauthorized(UploadError):
    status_code = 401
    message = "Unauthorized"


class BadRequest(UploadError):
    status_code = 400
    message = "No file uploaded"


class UploadFailed(UploadError):
    status_code = 500
    message = "Upload failed"


@dataclass(frozen=True)
class UploadResult:
    url: str


class UploadGateway:
    """Check the session, validate the payload, then make one storage attempt."""

    def __init__(
        self,
        resolver: SessionResolver,
        storage: StorageBackend,
        *,
        max_bytes: Optional[int] = None,
    ) -> None:
        self._resolver = resolver
        self._storage = storage
        self._max_bytes = max_bytes

    def authenticate(self, headers: Mapping[str, str]) -> UserSession:
        session = self._resolver(headers)
        if session is None:
            metrics.UPLOADS.labels(result="unauthorized").inc()
            raise Unauthorized()
        return session

    def store(
        self,
        session: UserSession,
        payload: Optional[bytes],
        filename: Optional[str],
        mime_type: Optional[str],
    ) -> UploadResult:
        """Validate ``payload`` and forward it verbatim to storage."""

        if not payload:
            metrics.UPLOADS.labels(result="bad_request").inc()
            raise BadRequest()
        if self._max_bytes is not None and len(payload) > self._max_bytes:
            logger.warning(
                "Rejected upload user_id=%s size=%s limit=%s",
                session.user_id,
                len(payload),
                self._max_bytes,
            )
            metrics.UPLOADS.labels(result="bad_request").inc()
            raise BadRequest()

        name = filename if filename and filename.strip() else DEFAULT_FILENAME
        content_type = mime_type or DEFAULT_CONTENT_TYPE
        try:
            url = self._storage.put(payload, name, content_type)
        except Exception as exc:
            logger.exception(
                "Upload error user_id=%s filename=%s content_type=%s",
                session.user_id,
                name,
                content_type,
            )
            metrics.UPLOADS.labels(result="failed").inc()
            raise UploadFailed() from exc

        metrics.UPLOADS.labels(result="stored").inc()
        logger.info(
            "Stored upload user_id=%s filename=%s size=%s", session.user_id, name, len(payload)
        )
        return UploadResult(url=url)

    def upload(
        self,
        headers: Mapping[str, str],
        payload: Optional[bytes],
        filename: Optional[str],
        mime_type: Optional[str],
    ) -> UploadResult:
        session = self.authenticate(headers)
        return self.store(session, payload, filename, mime_type)


__all__ = [
    "BadRequest",
    "Unauthorized",
    "UploadError",
    "UploadFailed",
    "UploadGateway",
    "UploadResult",
]
