"""Shared pytest fixtures for the ClairOS test suite."""

from __future__ import annotations

from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from clairos.config import get_settings
from clairos.db.repository import reset_repository_state
from clairos.db.sessions import create_session
from clairos.models.session import UserSession
from clairos.server.app import create_app
from clairos.shopping.categories import get_category_table


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Ensure each test uses an isolated SQLite database and upload directory."""

    monkeypatch.setenv("CLAIROS_DATABASE_PATH", str(tmp_path / "test_clairos.db"))
    monkeypatch.setenv("CLAIROS_STORAGE_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("CLAIROS_STORAGE_BACKEND", "local")
    monkeypatch.setenv("CLAIROS_TIMER_SWEEP_ENABLED", "0")
    get_settings.cache_clear()
    get_category_table.cache_clear()
    reset_repository_state()
    yield
    reset_repository_state()
    get_category_table.cache_clear()
    get_settings.cache_clear()


@pytest.fixture()
def app() -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app instance for each test and reset overrides."""

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)


@pytest.fixture()
def user_session() -> UserSession:
    """Persist an active session for a test user."""

    return create_session(user_id="user-1", email="pat@example.com", name="Pat")


@pytest.fixture()
def auth_headers(user_session) -> dict[str, str]:
    return {"Authorization": f"Bearer {user_session.token}"}
