"""Tests for logging utilities and sensitive data redaction."""

from __future__ import annotations

import logging

import pytest

from clairos.logging_utils import configure_logging


def _format(message: str, *args, secrets=(), fmt: str = "plain") -> str:
    configure_logging("INFO", fmt, list(secrets))

    handler = logging.getLogger().handlers[0]
    record = logging.LogRecord(
        name="clairos.test.redaction",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg=message,
        args=args,
        exc_info=None,
    )

    for filter_ in handler.filters:
        filter_.filter(record)

    return handler.format(record)


@pytest.mark.parametrize("fmt", ["plain", "json"])
def test_sensitive_data_filter_redacts_bearer_tokens(fmt):
    formatted = _format("Authorization header Bearer %s", "session-abc123", fmt=fmt)

    assert "session-abc123" not in formatted
    assert "[redacted]" in formatted


def test_session_cookie_values_are_redacted():
    formatted = _format("Cookie: clairos.session_token=%s; theme=dark", "cookie-secret")

    assert "cookie-secret" not in formatted
    assert "theme=dark" in formatted


def test_configured_secrets_are_redacted():
    formatted = _format("Connecting with %s", "minio-password", secrets=["minio-password"])

    assert "minio-password" not in formatted
    assert "[redacted]" in formatted
