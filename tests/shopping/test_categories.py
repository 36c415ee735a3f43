"""Tests for grocery category inference."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from clairos.shopping.categories import (
    FALLBACK_CATEGORY,
    build_category_table,
    classify,
    get_category_table,
    group_by_category,
    load_category_table,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Whole Milk", "Dairy"),
        ("MILK", "Dairy"),
        ("Bananas", "Produce"),
        ("chicken thighs", "Meat & Seafood"),
        ("Ice Cream", "Frozen"),
        ("coconut milk", "Pantry"),
        ("Dish soap", "Household"),
        ("shampoo", "Personal Care"),
        ("Ribeye steak", "Meat & Seafood"),
        ("Black pepper", "Spices & Condiments"),
        ("Orange juice", "Beverages"),
        ("apple juice", "Beverages"),
        ("Bell pepper", "Produce"),
    ],
)
def test_classify_uses_packaged_table(name, expected):
    assert classify(name) == expected


def test_classify_falls_back_to_other():
    assert classify("") == FALLBACK_CATEGORY
    assert classify("xyz gadget") == FALLBACK_CATEGORY


def test_classify_is_case_insensitive_and_deterministic():
    assert classify("whole milk") == classify("WHOLE MILK") == classify("Whole Milk")
    assert classify("Ice Cream") == classify("Ice Cream")


def test_earlier_rule_wins_when_patterns_overlap():
    table = build_category_table(
        ["Dairy", "Frozen"],
        [("cream", "Dairy"), ("ice cream", "Frozen")],
    )

    assert table.classify("ice cream") == "Dairy"
    assert table.classify("sour cream") == "Dairy"


def test_build_category_table_appends_fallback_and_lowercases_patterns():
    table = build_category_table(["Produce"], [("APPLE", "Produce")])

    assert table.categories == ("Produce", FALLBACK_CATEGORY)
    assert table.rules[0].pattern == "apple"
    assert table.classify("Green Apples") == "Produce"


def test_build_category_table_rejects_unknown_category():
    with pytest.raises(ValueError):
        build_category_table(["Produce"], [("milk", "Dairy")])


def test_load_category_table_preserves_file_order(tmp_path):
    path = tmp_path / "categories.json"
    path.write_text(
        json.dumps(
            {
                "categories": ["Dairy", "Frozen"],
                "mappings": {"cream": "Dairy", "ice cream": "Frozen"},
            }
        ),
        encoding="utf-8",
    )

    table = load_category_table(path)

    assert [rule.pattern for rule in table.rules] == ["cream", "ice cream"]
    assert table.classify("Ice Cream") == "Dairy"


def test_load_category_table_accepts_rule_list(tmp_path):
    path = tmp_path / "categories.json"
    path.write_text(
        json.dumps(
            {
                "categories": ["Dairy", "Frozen"],
                "mappings": [
                    {"pattern": "ice cream", "category": "Frozen"},
                    {"pattern": "cream", "category": "Dairy"},
                ],
            }
        ),
        encoding="utf-8",
    )

    table = load_category_table(path)

    assert table.classify("ice cream sandwich") == "Frozen"
    assert table.classify("heavy cream") == "Dairy"


def test_categories_path_setting_overrides_packaged_table(tmp_path, monkeypatch):
    path = tmp_path / "custom.json"
    path.write_text(
        json.dumps({"categories": ["Treats"], "mappings": {"milk": "Treats"}}),
        encoding="utf-8",
    )
    monkeypatch.setenv("CLAIROS_CATEGORIES_PATH", str(path))

    from clairos.config import get_settings

    get_settings.cache_clear()
    get_category_table.cache_clear()

    assert classify("Whole Milk") == "Treats"
    assert classify("bread") == FALLBACK_CATEGORY


def test_group_by_category_orders_sections_by_configured_labels():
    items = [
        SimpleNamespace(name="Whole Milk"),
        SimpleNamespace(name="Mystery box"),
        SimpleNamespace(name="Apples"),
        SimpleNamespace(name="Cheddar cheese"),
    ]

    sections = group_by_category(items)

    assert [category for category, _ in sections] == ["Produce", "Dairy", FALLBACK_CATEGORY]
    assert [item.name for item in sections[1][1]] == ["Whole Milk", "Cheddar cheese"]


def test_group_by_category_accepts_custom_name_accessor():
    table = build_category_table(["Produce"], [("apple", "Produce")])
    sections = group_by_category(
        [{"title": "pear"}, {"title": "apple"}],
        name_of=lambda entry: entry["title"],
        table=table,
    )

    assert sections == [("Produce", [{"title": "apple"}]), (FALLBACK_CATEGORY, [{"title": "pear"}])]
