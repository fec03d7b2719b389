from __future__ import annotations

from pydantic import BaseModel, Field


class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)

    model_config = {"json_schema_extra": {"example": {"name": "work"}}}


class CategoryOut(BaseModel):
    id: int
    name: str
    created_at: str

    model_config = {"from_attributes": True}


class CategoryResponse(BaseModel):
    category: CategoryOut


class CategoryListResponse(BaseModel):
    categories: list[CategoryOut]
