"""Pydantic models defining shared data contracts."""

from clairos.models.preferences import AppPreferences, TaskViewMode
from clairos.models.session import UserSession
from clairos.models.shopping import ShoppingItem, ShoppingList, ShoppingListStatus

__all__ = [
    "AppPreferences",
    "TaskViewMode",
    "UserSession",
    "ShoppingItem",
    "ShoppingList",
    "ShoppingListStatus",
]
