"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))


class Settings(BaseModel):
    """Global application settings loaded from environment variables or .env files."""

    database_path: Path = Field(
        default=Path("./data/clairos.db"),
        description="SQLite database location.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    log_requests: bool = Field(
        default=True,
        description="Emit request access logs when true.",
    )
    categories_path: Optional[Path] = Field(
        default=None,
        description="Override for the packaged grocery category table (JSON).",
    )
    storage_backend: str = Field(
        default="local",
        description="Upload storage backend (local or minio).",
    )
    storage_dir: Path = Field(
        default=Path("./data/uploads"),
        description="Root directory for the local storage backend.",
    )
    storage_bucket: str = Field(
        default="clairos",
        description="Bucket (or top-level folder) receiving uploaded objects.",
    )
    storage_public_url: str = Field(
        default="http://127.0.0.1:8000/files",
        description="Public base URL prefixed to uploaded object names.",
    )
    minio_endpoint: str = Field(default="localhost", description="MinIO endpoint host.")
    minio_port: int = Field(default=9000, description="MinIO endpoint port.")
    minio_use_ssl: bool = Field(default=False, description="Use TLS when talking to MinIO.")
    minio_access_key: Optional[str] = Field(default=None, description="MinIO access key.")
    minio_secret_key: Optional[str] = Field(default=None, description="MinIO secret key.")
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Largest accepted upload payload in bytes.",
    )
    session_cookie_name: str = Field(
        default="clairos.session_token",
        description="Cookie carrying the session token for browser clients.",
    )
    timer_sweep_enabled: bool = Field(
        default=True,
        description="Run the background timer completion sweep when true.",
    )
    timer_sweep_interval: float = Field(
        default=1.0,
        description="Seconds between timer completion sweeps.",
    )

    model_config = ConfigDict(frozen=True)


def _coerce_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip()
    except FileNotFoundError:
        return {}
    return payload


def _load_env_file_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        values.update(_parse_env_file(candidate))
    return values


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks)."""

    file_values = _load_env_file_values()

    def _env(key: str) -> Optional[str]:
        return os.environ.get(key) or file_values.get(key)

    payload: dict[str, object] = {}
    if (db_path := _env("CLAIROS_DATABASE_PATH")):
        payload["database_path"] = Path(db_path)
    if (log_level := _env("CLAIROS_LOG_LEVEL")):
        payload["log_level"] = log_level
    if (log_format := _env("CLAIROS_LOG_FORMAT")):
        payload["log_format"] = log_format
    if (log_requests := _env("CLAIROS_LOG_REQUESTS")):
        payload["log_requests"] = _coerce_bool(log_requests)
    if (categories_path := _env("CLAIROS_CATEGORIES_PATH")):
        payload["categories_path"] = Path(categories_path)
    if (storage_backend := _env("CLAIROS_STORAGE_BACKEND")):
        payload["storage_backend"] = storage_backend.strip().lower()
    if (storage_dir := _env("CLAIROS_STORAGE_DIR")):
        payload["storage_dir"] = Path(storage_dir)
    if (bucket := _env("CLAIROS_STORAGE_BUCKET") or _env("MINIO_BUCKET")):
        payload["storage_bucket"] = bucket
    if (public_url := _env("CLAIROS_STORAGE_PUBLIC_URL") or _env("MINIO_PUBLIC_URL")):
        payload["storage_public_url"] = public_url.rstrip("/")
    if (minio_endpoint := _env("MINIO_ENDPOINT")):
        payload["minio_endpoint"] = minio_endpoint
    if (minio_port := _env("MINIO_PORT")):
        try:
            payload["minio_port"] = int(minio_port)
        except ValueError:
            pass
    if (minio_use_ssl := _env("MINIO_USE_SSL")):
        payload["minio_use_ssl"] = _coerce_bool(minio_use_ssl)
    if (minio_access_key := _env("MINIO_ROOT_USER")):
        payload["minio_access_key"] = minio_access_key
    if (minio_secret_key := _env("MINIO_ROOT_PASSWORD")):
        payload["minio_secret_key"] = minio_secret_key
    if (max_upload := _env("CLAIROS_MAX_UPLOAD_BYTES")):
        try:
            payload["max_upload_bytes"] = int(max_upload)
        except ValueError:
            pass
    if (cookie_name := _env("CLAIROS_SESSION_COOKIE")):
        payload["session_cookie_name"] = cookie_name
    if (sweep_enabled := _env("CLAIROS_TIMER_SWEEP_ENABLED")):
        payload["timer_sweep_enabled"] = _coerce_bool(sweep_enabled)
    if (sweep_interval := _env("CLAIROS_TIMER_SWEEP_INTERVAL")):
        try:
            payload["timer_sweep_interval"] = float(sweep_interval)
        except ValueError:
            pass
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
