"""Tests for the filesystem storage backend."""

from __future__ import annotations

import pytest

from clairos.config import get_settings
from clairos.storage import LocalFileStorage, StorageError, build_storage
from clairos.storage.base import object_name_for, public_url_for


def test_object_name_prefixes_timestamp_and_sanitizes():
    clock = lambda: 1_700_000_000.5  # noqa: E731

    assert object_name_for("receipt.png", clock) == "1700000000500-receipt.png"
    assert object_name_for("../../etc/passwd", clock) == "1700000000500-passwd"
    assert object_name_for("my photo (1).jpg", clock) == "1700000000500-my_photo_1_.jpg"
    assert object_name_for("", clock) == "1700000000500-upload"


def test_public_url_joins_segments():
    assert (
        public_url_for("http://cdn.test/files/", "clairos", "1-a.txt")
        == "http://cdn.test/files/clairos/1-a.txt"
    )


def test_put_writes_bytes_and_returns_public_url(tmp_path):
    storage = LocalFileStorage(
        tmp_path,
        bucket="clairos",
        public_url="http://127.0.0.1:8000/files",
        clock=lambda: 42.0,
    )

    url = storage.put(b"\x00\x01binary", "scan.pdf", "application/pdf")

    assert url == "http://127.0.0.1:8000/files/clairos/42000-scan.pdf"
    assert (tmp_path / "clairos" / "42000-scan.pdf").read_bytes() == b"\x00\x01binary"
    assert not list((tmp_path / "clairos").glob("*.tmp"))


def test_put_wraps_filesystem_errors(tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("not a directory", encoding="utf-8")
    storage = LocalFileStorage(blocker, bucket="clairos", public_url="http://x")

    with pytest.raises(StorageError):
        storage.put(b"data", "a.txt", "text/plain")


def test_build_storage_selects_local_backend(tmp_path, monkeypatch):
    monkeypatch.setenv("CLAIROS_STORAGE_DIR", str(tmp_path))
    get_settings.cache_clear()

    storage = build_storage(get_settings())

    assert isinstance(storage, LocalFileStorage)
    assert storage.bucket_dir == tmp_path / "clairos"


def test_build_storage_rejects_unknown_backend(monkeypatch):
    monkeypatch.setenv("CLAIROS_STORAGE_BACKEND", "ftp")
    get_settings.cache_clear()

    with pytest.raises(ValueError):
        build_storage(get_settings())
