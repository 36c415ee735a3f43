"""Shopping list models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from clairos.shopping.categories import classify

ShoppingListStatus = Literal["active", "completed", "archived"]


class ShoppingItem(BaseModel):
    """Single line on a shopping list."""

    id: str
    list_id: str
    name: str = Field(min_length=1)
    quantity: float = Field(default=1, gt=0)
    unit: Optional[str] = Field(default=None)
    checked: bool = Field(default=False)
    added_by_id: Optional[str] = Field(default=None)
    source_recipe_id: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    sort_order: int = Field(default=0)

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def category(self) -> str:
        """Grocery category inferred from the current name."""

        return classify(self.name)


class ShoppingList(BaseModel):
    """Family shopping list with its items in display order."""

    id: str
    family_id: str
    name: str
    status: ShoppingListStatus = "active"
    notes: Optional[str] = Field(default=None)
    created_by_id: Optional[str] = Field(default=None)
    created_at: datetime
    completed_at: Optional[datetime] = Field(default=None)
    items: list[ShoppingItem] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


__all__ = ["ShoppingItem", "ShoppingList", "ShoppingListStatus"]
