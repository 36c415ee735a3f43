"""Tests for the injected preferences context."""

from __future__ import annotations

from clairos.models.preferences import AppPreferences
from clairos.preferences import PreferencesContext


class MemoryBackend:
    def __init__(self, initial: AppPreferences | None = None) -> None:
        self.stored = initial or AppPreferences()
        self.loads = 0
        self.saves: list[AppPreferences] = []

    def load(self) -> AppPreferences:
        self.loads += 1
        return self.stored

    def save(self, prefs: AppPreferences) -> AppPreferences:
        self.saves.append(prefs)
        self.stored = prefs
        return prefs


def test_context_loads_lazily_once():
    backend = MemoryBackend(AppPreferences(last_family_id="fam-1"))
    context = PreferencesContext(backend.load, backend.save)

    assert backend.loads == 0
    assert context.current.last_family_id == "fam-1"
    assert context.current.last_family_id == "fam-1"
    assert backend.loads == 1


def test_every_change_is_saved_immediately():
    backend = MemoryBackend()
    context = PreferencesContext(backend.load, backend.save)

    context.set_last_family_id("fam-2")
    context.set_last_shopping_list_id("list-4")
    context.set_task_view_mode("kanban")

    assert len(backend.saves) == 3
    assert backend.stored == AppPreferences(
        last_family_id="fam-2",
        last_shopping_list_id="list-4",
        task_view_mode="kanban",
    )


def test_unchanged_values_skip_the_save_hook():
    backend = MemoryBackend(AppPreferences(task_view_mode="kanban"))
    context = PreferencesContext(backend.load, backend.save)

    result = context.set_task_view_mode("kanban")

    assert result.task_view_mode == "kanban"
    assert backend.saves == []
