"""Build the JSON export document for a single user."""

from __future__ import annotations

from sqlalchemy.orm import Session

from ..crud.categories import list_categories
from ..crud.entries import list_entries
from ..crud.reflections import list_reflections
from ..schemas.category import CategoryOut
from ..schemas.entry import EntryOut
from ..schemas.export import ExportDocument
from ..schemas.reflection import ReflectionOut
from .timecalc import utcnow_iso


def export_user_data(db: Session, user_id: int) -> ExportDocument:
    return ExportDocument(
        exported_at=utcnow_iso(),
        entries=[EntryOut.model_validate(entry) for entry in list_entries(db, user_id)],
        categories=[CategoryOut.model_validate(category) for category in list_categories(db, user_id)],
        reflections=[ReflectionOut.model_validate(item) for item in list_reflections(db, user_id)],
    )
