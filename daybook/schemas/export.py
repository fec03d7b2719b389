from __future__ import annotations

from pydantic import BaseModel, Field

from .category import CategoryOut
from .entry import EntryOut
from .reflection import ReflectionOut


class ExportDocument(BaseModel):
    exported_at: str
    entries: list[EntryOut] = Field(default_factory=list)
    categories: list[CategoryOut] = Field(default_factory=list)
    reflections: list[ReflectionOut] = Field(default_factory=list)
