"""Injected client preference context.

Preferences (last selected family and shopping list, task view mode) live in
an explicit context object instead of ambient global state. The context is
loaded once when it is created for a user and every change is pushed through
the save hook immediately.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from clairos.models.preferences import AppPreferences, TaskViewMode

logger = logging.getLogger(__name__)

PreferencesLoader = Callable[[], AppPreferences]
PreferencesSaver = Callable[[AppPreferences], AppPreferences]


class PreferencesContext:
    """Holds one user's preferences with load-at-startup and save-on-change hooks."""

    def __init__(self, loader: PreferencesLoader, saver: PreferencesSaver) -> None:
        self._loader = loader
        self._saver = saver
        self._current: Optional[AppPreferences] = None

    @property
    def current(self) -> AppPreferences:
        if self._current is None:
            return self.load()
        return self._current

    def load(self) -> AppPreferences:
        self._current = self._loader()
        return self._current

    def update(self, **changes) -> AppPreferences:
        """Apply ``changes`` and persist; unchanged values skip the save hook."""

        current = self.current
        merged = AppPreferences.model_validate({**current.model_dump(), **changes})
        if merged == current:
            return current
        logger.debug("Preferences changed %s -> %s", current.model_dump(), merged.model_dump())
        self._current = self._saver(merged)
        return self._current

    def set_last_shopping_list_id(self, list_id: Optional[str]) -> AppPreferences:
        return self.update(last_shopping_list_id=list_id)

    def set_last_family_id(self, family_id: Optional[str]) -> AppPreferences:
        return self.update(last_family_id=family_id)

    def set_task_view_mode(self, mode: TaskViewMode) -> AppPreferences:
        return self.update(task_view_mode=mode)


__all__ = ["PreferencesContext", "PreferencesLoader", "PreferencesSaver"]
