from __future__ import annotations

import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ReflectionIn(BaseModel):
    date: datetime.date
    content: str = Field(..., min_length=1, max_length=20000)

    model_config = {
        "json_schema_extra": {"example": {"date": "2024-05-01", "content": "Good focus in the morning."}}
    }

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content is required")
        return value


class ReflectionOut(BaseModel):
    id: int
    date: str
    content: str
    created_at: str
    updated_at: Optional[str] = None

    model_config = {"from_attributes": True}


class ReflectionResponse(BaseModel):
    reflection: ReflectionOut


class ReflectionListResponse(BaseModel):
    reflections: list[ReflectionOut]
