"""Tests for the shopping list row interaction contract."""

from __future__ import annotations

from typing import Optional

import pytest

from clairos.models.shopping import ShoppingItem
from clairos.shopping.item_row import (
    RowCallbacks,
    RowMode,
    ShoppingItemRow,
    badge_for,
    format_item_label,
)


class RecordingCallbacks:
    def __init__(self) -> None:
        self.toggles = 0
        self.saves: list[str] = []
        self.deletes = 0
        self.edits = 0
        self.cancels = 0

    def build(self) -> RowCallbacks:
        return RowCallbacks(
            on_toggle=self._toggle,
            on_save=self.saves.append,
            on_delete=self._delete,
            on_edit=self._edit,
            on_cancel=self._cancel,
        )

    def _toggle(self) -> None:
        self.toggles += 1

    def _delete(self) -> None:
        self.deletes += 1

    def _edit(self) -> None:
        self.edits += 1

    def _cancel(self) -> None:
        self.cancels += 1


def _item(
    name: str = "Whole Milk",
    quantity: float = 1,
    unit: Optional[str] = None,
    checked: bool = False,
    source_recipe_id: Optional[str] = None,
) -> ShoppingItem:
    return ShoppingItem(
        id="item-1",
        list_id="list-1",
        name=name,
        quantity=quantity,
        unit=unit,
        checked=checked,
        source_recipe_id=source_recipe_id,
    )


@pytest.fixture()
def recorder() -> RecordingCallbacks:
    return RecordingCallbacks()


def test_toggle_is_suppressed_while_pending(recorder):
    row = ShoppingItemRow(_item(), recorder.build())

    assert row.toggle() is True
    assert row.is_pending
    assert row.checkbox_disabled
    assert row.toggle() is False
    assert recorder.toggles == 1

    row.sync(item=_item(checked=True), is_pending=False)

    assert not row.checkbox_disabled
    assert row.item.checked is True
    assert row.toggle() is True
    assert recorder.toggles == 2


def test_row_created_pending_ignores_clicks(recorder):
    row = ShoppingItemRow(_item(), recorder.build(), is_pending=True)

    assert row.toggle() is False
    assert recorder.toggles == 0


def test_enter_saves_edit_buffer_exactly_once(recorder):
    row = ShoppingItemRow(_item(), recorder.build())

    row.click_name()
    assert row.mode is RowMode.EDITING
    assert row.state.editing_name == "Whole Milk"
    assert row.state.has_focus
    assert recorder.edits == 1

    row.change("Oat Milk")
    assert row.label() == "Oat Milk"
    row.key("Enter")
    row.blur()

    assert recorder.saves == ["Oat Milk"]
    assert row.mode is RowMode.VIEWING
    assert row.state.editing_name == ""


def test_blur_commits_edit(recorder):
    row = ShoppingItemRow(_item(), recorder.build())

    row.click_name()
    row.change("Skim Milk")
    row.blur()

    assert recorder.saves == ["Skim Milk"]
    assert row.mode is RowMode.VIEWING


def test_escape_discards_edit_without_saving(recorder):
    row = ShoppingItemRow(_item(), recorder.build())

    row.click_name()
    row.change("Something else")
    row.key("Escape")
    row.blur()

    assert recorder.saves == []
    assert recorder.cancels == 1
    assert row.mode is RowMode.VIEWING
    assert row.label() == "Whole Milk"


def test_other_keys_and_viewing_events_are_ignored(recorder):
    row = ShoppingItemRow(_item(), recorder.build())

    row.change("ignored")
    row.key("Enter")
    row.blur()
    assert recorder.saves == []

    row.click_name()
    row.key("a")
    assert row.mode is RowMode.EDITING


def test_delete_emits_intent_and_keeps_row(recorder):
    row = ShoppingItemRow(_item(), recorder.build())

    row.delete()

    assert recorder.deletes == 1
    assert row.item.name == "Whole Milk"


def test_sync_clears_pending_after_failure(recorder):
    row = ShoppingItemRow(_item(), recorder.build())
    row.toggle()

    row.sync(is_pending=False)

    assert not row.is_pending
    assert row.item.checked is False


@pytest.mark.parametrize(
    ("quantity", "unit", "expected"),
    [
        (1, None, "Whole Milk"),
        (2, None, "2x Whole Milk"),
        (2, "gal", "2x Whole Milk (gal)"),
        (1, "gal", "Whole Milk (gal)"),
        (1.5, None, "1.5x Whole Milk"),
    ],
)
def test_format_item_label(quantity, unit, expected):
    assert format_item_label(_item(quantity=quantity, unit=unit)) == expected


def test_badge_hidden_for_missing_and_fallback_category(recorder):
    assert badge_for(None) is None
    assert badge_for("") is None
    assert badge_for("Other") is None
    assert badge_for("Dairy") == "Dairy"

    row = ShoppingItemRow(_item(), recorder.build(), category="Dairy")
    assert row.badge() == "Dairy"
    row.sync(category="Other")
    assert row.badge() is None


def test_source_recipe_id_exposed(recorder):
    row = ShoppingItemRow(_item(source_recipe_id="recipe-9"), recorder.build())

    assert row.source_recipe_id == "recipe-9"
