"""Shopping list helpers: grocery category inference and the row interaction contract."""

from clairos.shopping.categories import (
    FALLBACK_CATEGORY,
    CategoryRule,
    CategoryTable,
    classify,
    get_category_table,
    group_by_category,
    load_category_table,
)
from clairos.shopping.item_row import (
    RowCallbacks,
    RowEditState,
    ShoppingItemRow,
    badge_for,
    format_item_label,
)

__all__ = [
    "FALLBACK_CATEGORY",
    "CategoryRule",
    "CategoryTable",
    "classify",
    "get_category_table",
    "group_by_category",
    "load_category_table",
    "RowCallbacks",
    "RowEditState",
    "ShoppingItemRow",
    "badge_for",
    "format_item_label",
]
