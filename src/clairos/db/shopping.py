"""Shopping list persistence helpers."""
# mypy: ignore-errors

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from clairos.models.shopping import ShoppingItem, ShoppingList

from .models import ShoppingItemORM, ShoppingListORM
from .repository import session_scope

_UNSET = object()


def _item_to_model(row: ShoppingItemORM) -> ShoppingItem:
    return ShoppingItem.model_validate(
        {
            "id": row.id,
            "list_id": row.list_id,
            "name": row.name,
            "quantity": row.quantity,
            "unit": row.unit,
            "checked": row.checked,
            "added_by_id": row.added_by_id,
            "source_recipe_id": row.source_recipe_id,
            "notes": row.notes,
            "sort_order": row.sort_order,
        }
    )


def _list_to_model(row: ShoppingListORM) -> ShoppingList:
    return ShoppingList.model_validate(
        {
            "id": row.id,
            "family_id": row.family_id,
            "name": row.name,
            "status": row.status,
            "notes": row.notes,
            "created_by_id": row.created_by_id,
            "created_at": row.created_at,
            "completed_at": row.completed_at,
            "items": [_item_to_model(item) for item in row.items],
        }
    )


def list_shopping_lists(family_id: str) -> List[ShoppingList]:
    """Return a family's shopping lists, newest first, with their items."""

    with session_scope() as session:
        rows = (
            session.execute(
                select(ShoppingListORM)
                .where(ShoppingListORM.family_id == family_id)
                .options(selectinload(ShoppingListORM.items))
                .order_by(ShoppingListORM.created_at.desc(), ShoppingListORM.id.desc())
            )
            .scalars()
            .all()
        )
        return [_list_to_model(row) for row in rows]


def get_shopping_list(list_id: str) -> Optional[ShoppingList]:
    with session_scope() as session:
        row = session.get(ShoppingListORM, list_id)
        if row is None:
            return None
        return _list_to_model(row)


def create_shopping_list(
    *,
    family_id: str,
    name: str,
    created_by_id: Optional[str] = None,
) -> ShoppingList:
    with session_scope() as session:
        db_list = ShoppingListORM(
            id=str(uuid4()),
            family_id=family_id,
            name=name.strip(),
            status="active",
            created_by_id=created_by_id,
        )
        session.add(db_list)
        session.flush()
        session.refresh(db_list)
        return _list_to_model(db_list)


def update_shopping_list(
    list_id: str,
    *,
    name: str | object = _UNSET,
    notes: str | None | object = _UNSET,
) -> ShoppingList:
    with session_scope() as session:
        db_list = session.get(ShoppingListORM, list_id)
        if db_list is None:
            raise ValueError(f"Shopping list {list_id} not found")

        if name is not _UNSET and name:
            db_list.name = str(name).strip()
        if notes is not _UNSET:
            db_list.notes = notes  # type: ignore[assignment]

        session.flush()
        return _list_to_model(db_list)


def complete_shopping_list(list_id: str) -> ShoppingList:
    with session_scope() as session:
        db_list = session.get(ShoppingListORM, list_id)
        if db_list is None:
            raise ValueError(f"Shopping list {list_id} not found")
        db_list.status = "completed"
        db_list.completed_at = datetime.now(timezone.utc).replace(tzinfo=None)
        session.flush()
        return _list_to_model(db_list)


def delete_shopping_list(list_id: str) -> None:
    """Delete a list; its items go with it."""

    with session_scope() as session:
        db_list = session.get(ShoppingListORM, list_id)
        if db_list is None:
            raise ValueError(f"Shopping list {list_id} not found")
        session.delete(db_list)


def add_shopping_item(
    list_id: str,
    *,
    name: str,
    quantity: float = 1,
    unit: Optional[str] = None,
    source_recipe_id: Optional[str] = None,
    notes: Optional[str] = None,
    added_by_id: Optional[str] = None,
) -> ShoppingItem:
    """Add an item at the top of the list (one below the current minimum sort order)."""

    with session_scope() as session:
        if session.get(ShoppingListORM, list_id) is None:
            raise ValueError(f"Shopping list {list_id} not found")

        current_min = session.execute(
            select(func.min(ShoppingItemORM.sort_order)).where(ShoppingItemORM.list_id == list_id)
        ).scalar_one_or_none()
        sort_order = current_min - 1 if current_min is not None else 0

        db_item = ShoppingItemORM(
            id=str(uuid4()),
            list_id=list_id,
            name=name.strip(),
            quantity=float(quantity),
            unit=unit.strip() if unit else None,
            checked=False,
            added_by_id=added_by_id,
            source_recipe_id=source_recipe_id,
            notes=notes,
            sort_order=sort_order,
        )
        session.add(db_item)
        session.flush()
        return _item_to_model(db_item)


def toggle_shopping_item(item_id: str) -> ShoppingItem:
    with session_scope() as session:
        db_item = session.get(ShoppingItemORM, item_id)
        if db_item is None:
            raise ValueError(f"Shopping item {item_id} not found")
        db_item.checked = not db_item.checked
        session.flush()
        return _item_to_model(db_item)


def rename_shopping_item(item_id: str, name: str) -> ShoppingItem:
    with session_scope() as session:
        db_item = session.get(ShoppingItemORM, item_id)
        if db_item is None:
            raise ValueError(f"Shopping item {item_id} not found")
        db_item.name = name.strip()
        session.flush()
        return _item_to_model(db_item)


def delete_shopping_item(item_id: str) -> None:
    with session_scope() as session:
        db_item = session.get(ShoppingItemORM, item_id)
        if db_item is None:
            raise ValueError(f"Shopping item {item_id} not found")
        session.delete(db_item)


def get_shopping_item(item_id: str) -> Optional[ShoppingItem]:
    with session_scope() as session:
        row = session.get(ShoppingItemORM, item_id)
        if row is None:
            return None
        return _item_to_model(row)


__all__ = [
    "list_shopping_lists",
    "get_shopping_list",
    "create_shopping_list",
    "update_shopping_list",
    "complete_shopping_list",
    "delete_shopping_list",
    "add_shopping_item",
    "toggle_shopping_item",
    "rename_shopping_item",
    "delete_shopping_item",
    "get_shopping_item",
]
