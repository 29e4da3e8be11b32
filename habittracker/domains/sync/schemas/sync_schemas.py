"""Sync response schemas (camelCase on the wire)."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SyncStatusResponse(BaseModel):
    status: str
    last_sync: dt.datetime = Field(serialization_alias="lastSync")
    local_count: Optional[int] = Field(default=None, serialization_alias="localCount")
    cloud_count: Optional[int] = Field(default=None, serialization_alias="cloudCount")
    cloud_available: Optional[bool] = Field(default=None, serialization_alias="cloudAvailable")
    database: str
    environment: str

    model_config = ConfigDict(from_attributes=True)


class SyncOutcomeResponse(BaseModel):
    message: str
    direction: Optional[str] = None
    uploaded: Optional[int] = None
    downloaded: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


def serialize_status(status) -> dict:
    return SyncStatusResponse.model_validate(status).model_dump(
        mode="json", by_alias=True, exclude_none=True
    )


def serialize_outcome(outcome) -> dict:
    return SyncOutcomeResponse.model_validate(outcome).model_dump(mode="json", exclude_none=True)
