"""ASGI application factory and dependencies for the ClairOS server."""

from clairos.server.app import app, create_app

__all__ = ["app", "create_app"]
