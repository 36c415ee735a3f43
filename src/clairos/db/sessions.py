"""Session lookup and development issuance helpers."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import delete

from clairos.models.session import UserSession

from .models import SessionORM
from .repository import session_scope

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _to_model(row: SessionORM) -> UserSession:
    return UserSession.model_validate(
        {
            "token": row.token,
            "user_id": row.user_id,
            "email": row.email,
            "name": row.name,
            "expires_at": row.expires_at,
        }
    )


def create_session(
    *,
    user_id: str,
    email: Optional[str] = None,
    name: Optional[str] = None,
    ttl: Optional[timedelta] = timedelta(days=7),
    token: Optional[str] = None,
) -> UserSession:
    """Persist a session row and return it with its token."""

    with session_scope() as session:
        row = SessionORM(
            token=token or secrets.token_urlsafe(32),
            user_id=user_id,
            email=email,
            name=name,
            expires_at=_utcnow() + ttl if ttl is not None else None,
        )
        session.add(row)
        session.flush()
        logger.info("Issued session for user_id=%s expires_at=%s", user_id, row.expires_at)
        return _to_model(row)


def get_active_session(token: str, now: Optional[datetime] = None) -> Optional[UserSession]:
    """Return the session for ``token`` unless it is unknown or expired."""

    if not token:
        return None
    with session_scope() as session:
        row = session.get(SessionORM, token)
        if row is None:
            return None
        if row.expires_at is not None and row.expires_at <= (now or _utcnow()):
            logger.debug("Session for user_id=%s expired at %s", row.user_id, row.expires_at)
            return None
        return _to_model(row)


def revoke_session(token: str) -> None:
    with session_scope() as session:
        row = session.get(SessionORM, token)
        if row is None:
            raise ValueError("Session not found")
        session.delete(row)


def purge_expired_sessions(now: Optional[datetime] = None) -> int:
    with session_scope() as session:
        result = session.execute(
            delete(SessionORM).where(
                SessionORM.expires_at.is_not(None),
                SessionORM.expires_at <= (now or _utcnow()),
            )
        )
        return result.rowcount or 0


__all__ = ["create_session", "get_active_session", "revoke_session", "purge_expired_sessions"]
