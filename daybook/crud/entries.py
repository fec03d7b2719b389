from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.results import Result
from ..models.entry import Entry
from ..services.timecalc import normalize_timestamp, utcnow_iso
from .ownership import commit_owned, delete_owned, get_owned, list_owned

ENTRY_FIELDS = ("start_time", "end_time", "activity_name", "category", "energy", "intent")


def _apply(entry: Entry, payload: dict) -> None:
    for field in ENTRY_FIELDS:
        if field not in payload:
            continue
        value = payload.get(field)
        if isinstance(value, datetime):
            value = normalize_timestamp(value, settings.TZ)
        elif isinstance(value, str):
            value = value.strip() or None
        setattr(entry, field, value)


def list_entries(db: Session, user_id: int) -> list[Entry]:
    return list_owned(db, Entry, user_id, Entry.start_time, Entry.id)


def get_entry(db: Session, user_id: int, entry_id: int) -> Result[Entry]:
    return get_owned(db, Entry, entry_id, user_id)


def create_entry(db: Session, user_id: int, payload: dict) -> Result[Entry]:
    now = utcnow_iso()
    entry = Entry(user_id=user_id, created_at=now, updated_at=now)
    _apply(entry, payload)
    db.add(entry)
    return commit_owned(db, entry)


def update_entry(db: Session, user_id: int, entry_id: int, payload: dict) -> Result[Entry]:
    loaded = get_owned(db, Entry, entry_id, user_id)
    if not loaded.ok:
        return loaded
    entry = loaded.value
    _apply(entry, payload)
    entry.updated_at = utcnow_iso()
    return commit_owned(db, entry)


def delete_entry(db: Session, user_id: int, entry_id: int) -> Result[None]:
    return delete_owned(db, Entry, entry_id, user_id)
