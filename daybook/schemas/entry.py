from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ..core.config import settings
from ..services.timecalc import ensure_aware


class EntryIn(BaseModel):
    start_time: datetime
    end_time: datetime
    activity_name: str = Field(..., min_length=1, max_length=200)
    category: Optional[str] = Field(default=None, max_length=100)
    energy: Optional[int] = Field(default=None, ge=1, le=5)
    intent: Optional[str] = Field(default=None, max_length=500)

    model_config = {
        "json_schema_extra": {
            "example": {
                "start_time": "2024-05-01T09:00:00Z",
                "end_time": "2024-05-01T09:30:00Z",
                "activity_name": "Deep work",
                "category": "work",
            }
        }
    }

    @model_validator(mode="after")
    def check_span(self) -> "EntryIn":
        if not self.activity_name.strip():
            raise ValueError("activity_name is required")
        if ensure_aware(self.end_time, settings.TZ) < ensure_aware(self.start_time, settings.TZ):
            raise ValueError("end_time must not be before start_time")
        return self


class EntryOut(BaseModel):
    id: int
    start_time: str
    end_time: str
    activity_name: str
    category: Optional[str] = None
    energy: Optional[int] = None
    intent: Optional[str] = None
    duration_minutes: int = 0
    created_at: str
    updated_at: Optional[str] = None

    model_config = {"from_attributes": True}


class EntryResponse(BaseModel):
    entry: EntryOut


class EntryListResponse(BaseModel):
    entries: list[EntryOut]
