"""Client preference models."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TaskViewMode = Literal["list", "kanban"]


class AppPreferences(BaseModel):
    """Last-used selections and view modes remembered for a user."""

    last_shopping_list_id: Optional[str] = Field(default=None)
    last_family_id: Optional[str] = Field(default=None)
    task_view_mode: TaskViewMode = Field(default="list")

    model_config = ConfigDict(frozen=True)


__all__ = ["AppPreferences", "TaskViewMode"]
