"""Per-user categories. ``(user_id, name)`` is unique."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.results import ErrorKind, Result
from ..models.category import Category
from ..services.timecalc import utcnow_iso
from .ownership import commit_owned, delete_owned, get_owned, list_owned

DUPLICATE_NAME_MESSAGE = "This category name already exists."


def _name_taken(db: Session, user_id: int, name: str, exclude_id: int | None = None) -> bool:
    stmt = select(Category.id).where(Category.user_id == user_id, Category.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Category.id != exclude_id)
    return db.execute(stmt).first() is not None


def list_categories(db: Session, user_id: int) -> list[Category]:
    return list_owned(db, Category, user_id, Category.name)


def get_category(db: Session, user_id: int, category_id: int) -> Result[Category]:
    return get_owned(db, Category, category_id, user_id)


def create_category(db: Session, user_id: int, payload: dict) -> Result[Category]:
    name = (payload.get("name") or "").strip()
    if not name:
        return Result.failure(ErrorKind.INVALID_INPUT, "Please provide a valid category name.")
    if _name_taken(db, user_id, name):
        return Result.failure(ErrorKind.DUPLICATE_NAME, DUPLICATE_NAME_MESSAGE)
    category = Category(user_id=user_id, name=name, created_at=utcnow_iso())
    db.add(category)
    return commit_owned(db, category, conflict=ErrorKind.DUPLICATE_NAME, conflict_message=DUPLICATE_NAME_MESSAGE)


def update_category(db: Session, user_id: int, category_id: int, payload: dict) -> Result[Category]:
    name = (payload.get("name") or "").strip()
    if not name:
        return Result.failure(ErrorKind.INVALID_INPUT, "Please provide a valid category name.")
    loaded = get_owned(db, Category, category_id, user_id)
    if not loaded.ok:
        return loaded
    category = loaded.value
    if _name_taken(db, user_id, name, exclude_id=category.id):
        return Result.failure(ErrorKind.DUPLICATE_NAME, DUPLICATE_NAME_MESSAGE)
    category.name = name
    return commit_owned(db, category, conflict=ErrorKind.DUPLICATE_NAME, conflict_message=DUPLICATE_NAME_MESSAGE)


def delete_category(db: Session, user_id: int, category_id: int) -> Result[None]:
    return delete_owned(db, Category, category_id, user_id)
