"""Session resolution for authenticated endpoints."""

from clairos.auth.sessions import SessionResolver, build_session_resolver, extract_session_token

__all__ = ["SessionResolver", "build_session_resolver", "extract_session_token"]
