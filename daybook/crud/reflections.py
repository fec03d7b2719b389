from __future__ import annotations

from datetime import date

from sqlalchemy import desc
from sqlalchemy.orm import Session

from ..core.results import ErrorKind, Result
from ..models.reflection import Reflection
from ..services.timecalc import utcnow_iso
from .ownership import commit_owned, delete_owned, get_owned, list_owned

INVALID_MESSAGE = "Please provide a valid date and content."


def _day(value: object) -> str | None:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()).isoformat()
        except ValueError:
            return None
    return None


def _content(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def list_reflections(db: Session, user_id: int) -> list[Reflection]:
    return list_owned(db, Reflection, user_id, desc(Reflection.date), desc(Reflection.id))


def get_reflection(db: Session, user_id: int, reflection_id: int) -> Result[Reflection]:
    return get_owned(db, Reflection, reflection_id, user_id)


def create_reflection(db: Session, user_id: int, payload: dict) -> Result[Reflection]:
    day = _day(payload.get("date"))
    content = _content(payload.get("content"))
    if day is None or content is None:
        return Result.failure(ErrorKind.INVALID_INPUT, INVALID_MESSAGE)
    now = utcnow_iso()
    reflection = Reflection(user_id=user_id, date=day, content=content, created_at=now, updated_at=now)
    db.add(reflection)
    return commit_owned(db, reflection)


def update_reflection(db: Session, user_id: int, reflection_id: int, payload: dict) -> Result[Reflection]:
    day = _day(payload["date"]) if "date" in payload else None
    content = _content(payload["content"]) if "content" in payload else None
    if ("date" in payload and day is None) or ("content" in payload and content is None):
        return Result.failure(ErrorKind.INVALID_INPUT, INVALID_MESSAGE)
    loaded = get_owned(db, Reflection, reflection_id, user_id)
    if not loaded.ok:
        return loaded
    reflection = loaded.value
    if day is not None:
        reflection.date = day
    if content is not None:
        reflection.content = content
    reflection.updated_at = utcnow_iso()
    return commit_owned(db, reflection)


def delete_reflection(db: Session, user_id: int, reflection_id: int) -> Result[None]:
    return delete_owned(db, Reflection, reflection_id, user_id)
