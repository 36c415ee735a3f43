"""Interaction contract for a single shopping list row.

A row renders one handed-in item and translates user events (clicking the
name, typing, Enter/Escape, blur, checkbox clicks, delete) into intents on
externally supplied callbacks. It never persists anything itself: the caller
re-supplies the item and the pending flag through :meth:`ShoppingItemRow.sync`
once the mutation settles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol

from clairos.shopping.categories import FALLBACK_CATEGORY

logger = logging.getLogger(__name__)


class RowItem(Protocol):
    name: str
    quantity: float
    unit: Optional[str]
    checked: bool
    source_recipe_id: Optional[str]


@dataclass
class RowCallbacks:
    """Mutation intents emitted by the row."""

    on_toggle: Callable[[], None]
    on_save: Callable[[str], None]
    on_delete: Callable[[], None]
    on_edit: Callable[[], None] = lambda: None
    on_cancel: Callable[[], None] = lambda: None


@dataclass
class RowEditState:
    """Transient, row-local UI state."""

    is_editing: bool = False
    editing_name: str = ""
    is_pending: bool = False
    has_focus: bool = False


class RowMode(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"


def format_quantity(quantity: float) -> str:
    if float(quantity).is_integer():
        return str(int(quantity))
    return f"{quantity:g}"


def format_item_label(item: RowItem) -> str:
    """Render the static label: ``"{qty}x "`` prefix only above 1, unit in parentheses."""

    parts: list[str] = []
    if item.quantity is not None and item.quantity > 1:
        parts.append(f"{format_quantity(item.quantity)}x ")
    parts.append(item.name)
    if item.unit:
        parts.append(f" ({item.unit})")
    return "".join(parts)


def badge_for(category: Optional[str]) -> Optional[str]:
    """Category badge text, hidden for missing categories and the fallback."""

    if not category or category == FALLBACK_CATEGORY:
        return None
    return category


class ShoppingItemRow:
    """Viewing/Editing state machine with a Pending overlay for one item."""

    def __init__(
        self,
        item: RowItem,
        callbacks: RowCallbacks,
        *,
        category: Optional[str] = None,
        is_pending: bool = False,
    ) -> None:
        self.item = item
        self.category = category
        self._callbacks = callbacks
        self.state = RowEditState(is_pending=is_pending)

    @property
    def mode(self) -> RowMode:
        return RowMode.EDITING if self.state.is_editing else RowMode.VIEWING

    @property
    def is_pending(self) -> bool:
        return self.state.is_pending

    @property
    def checkbox_disabled(self) -> bool:
        return self.state.is_pending

    @property
    def source_recipe_id(self) -> Optional[str]:
        return getattr(self.item, "source_recipe_id", None)

    def label(self) -> str:
        """Text shown for the row; the edit buffer while editing."""

        if self.state.is_editing:
            return self.state.editing_name
        return format_item_label(self.item)

    def badge(self) -> Optional[str]:
        return badge_for(self.category)

    def click_name(self) -> None:
        """Viewing -> Editing: capture the current name and take focus."""

        if self.state.is_editing:
            return
        self.state.is_editing = True
        self.state.editing_name = self.item.name
        self.state.has_focus = True
        self._callbacks.on_edit()

    def change(self, text: str) -> None:
        if self.state.is_editing:
            self.state.editing_name = text

    def key(self, key: str) -> None:
        if not self.state.is_editing:
            return
        if key == "Enter":
            self._commit()
        elif key == "Escape":
            self._cancel()

    def blur(self) -> None:
        if self.state.is_editing:
            self._commit()

    def toggle(self) -> bool:
        """Emit a toggle intent unless one is already in flight.

        Returns ``True`` when an intent was emitted.
        """

        if self.state.is_pending:
            logger.debug("Ignoring toggle for %r while a mutation is pending", self.item.name)
            return False
        self.state.is_pending = True
        self._callbacks.on_toggle()
        return True

    def delete(self) -> None:
        """Signal deletion; the row stays until the caller drops the item."""

        self._callbacks.on_delete()

    def sync(
        self,
        *,
        item: Optional[RowItem] = None,
        is_pending: bool = False,
        category: Optional[str] = None,
    ) -> None:
        """Re-supply props after a mutation settles (success or failure)."""

        if item is not None:
            self.item = item
        if category is not None:
            self.category = category
        self.state.is_pending = is_pending

    def _commit(self) -> None:
        buffer = self.state.editing_name
        self._reset_edit()
        self._callbacks.on_save(buffer)

    def _cancel(self) -> None:
        self._reset_edit()
        self._callbacks.on_cancel()

    def _reset_edit(self) -> None:
        self.state.is_editing = False
        self.state.editing_name = ""
        self.state.has_focus = False


__all__ = [
    "RowCallbacks",
    "RowEditState",
    "RowMode",
    "ShoppingItemRow",
    "badge_for",
    "format_item_label",
]
