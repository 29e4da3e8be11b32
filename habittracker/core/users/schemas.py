"""Typed schemas for user IO."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from habittracker.core.users.models import User


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)


class UserResponse(BaseModel):
    # Persisted emails are not re-validated on the way out.
    id: int
    email: str
    name: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


def serialize_user(user: "User") -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")
