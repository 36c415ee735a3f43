"""Data access helpers for per-user client preferences."""

from __future__ import annotations

import json
import logging
from typing import Dict

from sqlalchemy import select

from clairos.models.preferences import AppPreferences

from .models import PreferenceORM
from .repository import session_scope

logger = logging.getLogger(__name__)

PREFERENCE_KEYS = set(AppPreferences.model_fields)


def _decode_value(value: str):
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def load_preferences(user_id: str) -> AppPreferences:
    """Load stored preferences for ``user_id`` or return defaults if none set."""

    with session_scope() as session:
        rows = (
            session.execute(select(PreferenceORM).where(PreferenceORM.user_id == user_id))
            .scalars()
            .all()
        )

        data: Dict[str, object] = {}
        for row in rows:
            if row.key in PREFERENCE_KEYS:
                data[row.key] = _decode_value(row.value)

    logger.debug("Loaded preferences user_id=%s payload=%s", user_id, data)
    return AppPreferences.model_validate(data)


def save_preferences(user_id: str, prefs: AppPreferences) -> AppPreferences:
    """Persist the provided preferences payload."""

    payload = prefs.model_dump()
    logger.debug("Persisting preferences user_id=%s payload=%s", user_id, payload)

    with session_scope() as session:
        for key, value in payload.items():
            session.merge(PreferenceORM(user_id=user_id, key=key, value=json.dumps(value)))

    return load_preferences(user_id)


__all__ = ["load_preferences", "save_preferences"]
