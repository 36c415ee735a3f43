"""Grocery category inference for shopping list items.

Items are classified by scanning an ordered rule table of ``pattern -> category``
pairs and returning the category of the first pattern contained in the
lower-cased item name. Rule order is the tie-break: when two patterns match,
the one listed earlier in ``categories.json`` wins, so the table is kept as a
tuple and never re-keyed into an unordered structure.

To add new rules, edit ``categories.json`` and place more specific patterns
(``"ice cream"``) above the general ones they contain (``"cream"``).
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Optional, TypeVar

from clairos.config import get_settings

FALLBACK_CATEGORY = "Other"

T = TypeVar("T")


@dataclass(frozen=True)
class CategoryRule:
    """Single substring pattern mapped to a grocery category."""

    pattern: str
    category: str


@dataclass(frozen=True)
class CategoryTable:
    """Configured category labels plus the ordered rule table."""

    categories: tuple[str, ...]
    rules: tuple[CategoryRule, ...]

    def classify(self, item_name: str) -> str:
        """Return the category of the first rule whose pattern occurs in ``item_name``."""

        lowered = (item_name or "").lower()
        for rule in self.rules:
            if rule.pattern in lowered:
                return rule.category
        return FALLBACK_CATEGORY

    def position(self, category: str) -> Optional[int]:
        try:
            return self.categories.index(category)
        except ValueError:
            return None


def build_category_table(
    categories: Sequence[str],
    mappings: Iterable[tuple[str, str]],
) -> CategoryTable:
    """Build a validated table from labels and ordered ``(pattern, category)`` pairs."""

    labels: list[str] = []
    for raw in categories:
        label = str(raw).strip()
        if label and label not in labels:
            labels.append(label)
    if FALLBACK_CATEGORY not in labels:
        labels.append(FALLBACK_CATEGORY)

    rules: list[CategoryRule] = []
    for raw_pattern, raw_category in mappings:
        pattern = str(raw_pattern).strip().lower()
        category = str(raw_category).strip()
        if not pattern:
            continue
        if category not in labels:
            raise ValueError(f"Pattern '{pattern}' maps to unknown category '{category}'")
        rules.append(CategoryRule(pattern=pattern, category=category))

    return CategoryTable(categories=tuple(labels), rules=tuple(rules))


def _table_from_payload(payload: Mapping[str, Any]) -> CategoryTable:
    categories = payload.get("categories") or []
    mappings = payload.get("mappings") or {}
    if isinstance(mappings, Mapping):
        # json.load keeps object key order, which is the rule order.
        pairs = list(mappings.items())
    else:
        pairs = [(entry["pattern"], entry["category"]) for entry in mappings]
    return build_category_table(categories, pairs)


def load_category_table(path: Path | None = None) -> CategoryTable:
    """Load the category table from ``path`` or the packaged ``categories.json``."""

    if path is not None:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    else:
        raw = resources.files("clairos.shopping").joinpath("categories.json").read_text("utf-8")
        payload = json.loads(raw)
    return _table_from_payload(payload)


@lru_cache(maxsize=1)
def get_category_table() -> CategoryTable:
    """Return the process-wide category table (loaded once)."""

    return load_category_table(get_settings().categories_path)


def classify(item_name: str, table: CategoryTable | None = None) -> str:
    """Classify a free-text grocery item name; always returns a category."""

    return (table or get_category_table()).classify(item_name)


def group_by_category(
    items: Iterable[T],
    *,
    name_of=lambda item: item.name,
    table: CategoryTable | None = None,
) -> list[tuple[str, list[T]]]:
    """Group items into sections ordered like the configured category labels.

    Categories missing from the configured labels sort after the known ones.
    Items keep their incoming order inside each section.
    """

    active = table or get_category_table()
    grouped: dict[str, list[T]] = {}
    for item in items:
        grouped.setdefault(active.classify(name_of(item)), []).append(item)

    def _sort_key(category: str) -> tuple[int, int]:
        position = active.position(category)
        return (1, 0) if position is None else (0, position)

    return [(category, grouped[category]) for category in sorted(grouped, key=_sort_key)]


__all__ = [
    "FALLBACK_CATEGORY",
    "CategoryRule",
    "CategoryTable",
    "build_category_table",
    "load_category_table",
    "get_category_table",
    "classify",
    "group_by_category",
]
