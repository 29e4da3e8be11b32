"""Habit DTOs and schemas."""

from __future__ import annotations

import datetime as dt
from typing import Dict, Optional, Type

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

_SCHEDULE_ALIASES = AliasChoices("schedule_type", "type")


class HabitCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=4096)
    category: str = Field(max_length=50)
    unit: Optional[str] = Field(default=None, max_length=50)
    target: Optional[float] = Field(default=None, ge=0)
    color: Optional[str] = Field(default=None, max_length=7)
    schedule_type: Optional[str] = Field(
        default=None, max_length=20, validation_alias=_SCHEDULE_ALIASES
    )


class HabitUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=4096)
    category: Optional[str] = Field(default=None, max_length=50)
    unit: Optional[str] = Field(default=None, max_length=50)
    target: Optional[float] = Field(default=None, ge=0)
    color: Optional[str] = Field(default=None, max_length=7)
    schedule_type: Optional[str] = Field(
        default=None, max_length=20, validation_alias=_SCHEDULE_ALIASES
    )


class HabitResponse(BaseModel):
    id: int
    user_id: int
    name: str
    description: Optional[str]
    category: str
    unit: Optional[str]
    target: float
    color: str
    schedule_type: str
    created_at: Optional[dt.datetime]
    updated_at: Optional[dt.datetime]

    model_config = ConfigDict(from_attributes=True)


class CompletionEntryRequest(BaseModel):
    date: dt.date
    completed: bool


class ValueEntryRequest(BaseModel):
    date: dt.date
    value: float


class MoodEntryRequest(BaseModel):
    date: dt.date
    mood: int = Field(ge=1, le=5)


class EntryResponse(BaseModel):
    id: int
    habit_id: int
    user_id: int
    date: dt.date
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CompletionEntryResponse(EntryResponse):
    completed: bool


class ValueEntryResponse(EntryResponse):
    value: float


class MoodEntryResponse(EntryResponse):
    mood: int


ENTRY_REQUESTS: Dict[str, Type[BaseModel]] = {
    "completion": CompletionEntryRequest,
    "value": ValueEntryRequest,
    "mood": MoodEntryRequest,
}

ENTRY_RESPONSES: Dict[str, Type[EntryResponse]] = {
    "completion": CompletionEntryResponse,
    "value": ValueEntryResponse,
    "mood": MoodEntryResponse,
}


def serialize_habit(habit) -> dict:
    return HabitResponse.model_validate(habit).model_dump(mode="json")


def serialize_entry(entry, variant: str) -> dict:
    return ENTRY_RESPONSES[variant].model_validate(entry).model_dump(mode="json")
