"""Resolve authenticated sessions from inbound request headers."""

from __future__ import annotations

import logging
from http.cookies import CookieError, SimpleCookie
from typing import Callable, Mapping, Optional

from clairos.db.sessions import get_active_session
from clairos.models.session import UserSession

logger = logging.getLogger(__name__)

SessionResolver = Callable[[Mapping[str, str]], Optional[UserSession]]


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is None:
        value = headers.get(name.lower())
    return value


def extract_session_token(headers: Mapping[str, str], cookie_name: str) -> Optional[str]:
    """Return the bearer token or session cookie value carried by ``headers``."""

    auth_header = _header(headers, "Authorization")
    if auth_header:
        scheme, _, credentials = auth_header.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()

    cookie_header = _header(headers, "Cookie")
    if cookie_header:
        cookies = SimpleCookie()
        try:
            cookies.load(cookie_header)
        except CookieError:
            logger.debug("Ignoring malformed Cookie header")
            return None
        morsel = cookies.get(cookie_name)
        if morsel is not None and morsel.value:
            return morsel.value
    return None


def build_session_resolver(
    cookie_name: str,
    lookup: Callable[[str], Optional[UserSession]] = get_active_session,
) -> SessionResolver:
    """Return a resolver mapping headers to an active session (or ``None``)."""

    def resolve(headers: Mapping[str, str]) -> Optional[UserSession]:
        token = extract_session_token(headers, cookie_name)
        if not token:
            return None
        return lookup(token)

    return resolve


__all__ = ["SessionResolver", "build_session_resolver", "extract_session_token"]
