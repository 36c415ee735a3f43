"""S3-compatible object storage backend (MinIO)."""

from __future__ import annotations

import io
import json
import logging
import threading
import time
from typing import Callable

from minio import Minio
from minio.error import MinioException

from .base import StorageError, object_name_for, public_url_for

logger = logging.getLogger(__name__)


def public_read_policy(bucket: str) -> str:
    """Bucket policy allowing anonymous reads so stored objects resolve by URL."""

    return json.dumps(
        {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Effect": "Allow",
                    "Principal": {"AWS": ["*"]},
                    "Action": ["s3:GetBucketLocation", "s3:ListBucket"],
                    "Resource": [f"arn:aws:s3:::{bucket}"],
                },
                {
                    "Effect": "Allow",
                    "Principal": {"AWS": ["*"]},
                    "Action": ["s3:GetObject"],
                    "Resource": [f"arn:aws:s3:::{bucket}/*"],
                },
            ],
        }
    )


class MinioStorage:
    """Upload objects to a MinIO bucket, creating it with a public-read policy on first use."""

    def __init__(
        self,
        client: Minio,
        *,
        bucket: str,
        public_url: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self.bucket = bucket
        self.public_url = public_url
        self._clock = clock
        self._bucket_ready = False
        self._bucket_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "MinioStorage":
        client = Minio(
            f"{settings.minio_endpoint}:{settings.minio_port}",
            access_key=settings.minio_access_key,
            secret_key=settings.minio_secret_key,
            secure=settings.minio_use_ssl,
        )
        return cls(client, bucket=settings.storage_bucket, public_url=settings.storage_public_url)

    def ensure_bucket(self) -> None:
        with self._bucket_lock:
            if self._bucket_ready:
                return
            if not self._client.bucket_exists(self.bucket):
                logger.info("Creating storage bucket %s", self.bucket)
                self._client.make_bucket(self.bucket)
                self._client.set_bucket_policy(self.bucket, public_read_policy(self.bucket))
            self._bucket_ready = True

    def put(self, content: bytes, filename: str, content_type: str) -> str:
        object_name = object_name_for(filename, self._clock)
        try:
            self.ensure_bucket()
            self._client.put_object(
                self.bucket,
                object_name,
                io.BytesIO(content),
                length=len(content),
                content_type=content_type,
            )
        except MinioException as exc:
            raise StorageError(f"Unable to upload {object_name}: {exc}") from exc
        logger.debug(
            "Stored object bucket=%s name=%s size=%s content_type=%s",
            self.bucket,
            object_name,
            len(content),
            content_type,
        )
        return public_url_for(self.public_url, self.bucket, object_name)


__all__ = ["MinioStorage", "public_read_policy"]
