"""Authenticated session models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserSession(BaseModel):
    """Session resolved from inbound request headers."""

    token: str
    user_id: str
    email: Optional[str] = Field(default=None)
    name: Optional[str] = Field(default=None)
    expires_at: Optional[datetime] = Field(default=None)

    model_config = ConfigDict(frozen=True)


__all__ = ["UserSession"]
