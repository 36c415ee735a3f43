"""Authenticated file uploads."""

from clairos.uploads.gateway import (
    BadRequest,
    Unauthorized,
    UploadError,
    UploadFailed,
    UploadGateway,
    UploadResult,
)

__all__ = [
    "BadRequest",
    "Unauthorized",
    "UploadError",
    "UploadFailed",
    "UploadGateway",
    "UploadResult",
]
