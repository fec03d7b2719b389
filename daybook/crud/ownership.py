"""The ownership protocol shared by every per-id operation on owned rows.

Existence is decided before ownership: a missing id is ``NOT_FOUND`` and only
a row that exists but belongs to someone else is ``FORBIDDEN`` (or also
``NOT_FOUND`` when ``OWNERSHIP_HIDE_EXISTENCE`` is set). List queries do not go
through here; they filter on ``user_id`` directly.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..core.config import settings
from ..core.results import ErrorKind, Result

# SQLite INTEGER is a signed 64-bit value; larger ids cannot be bound.
MAX_ROW_ID = 2**63 - 1


def _label(model: Any) -> str:
    return getattr(model, "resource_label", model.__name__)


def _not_found(model: Any) -> Result[Any]:
    return Result.failure(ErrorKind.NOT_FOUND, f"{_label(model)} not found.")


def check_ownership(db: Session, model: Any, resource_id: int, user_id: int) -> Result[None]:
    if not 1 <= resource_id <= MAX_ROW_ID:
        return _not_found(model)
    owner_id = db.execute(select(model.user_id).where(model.id == resource_id)).scalar_one_or_none()
    if owner_id is None:
        return _not_found(model)
    if owner_id != user_id:
        if settings.OWNERSHIP_HIDE_EXISTENCE:
            return _not_found(model)
        return Result.failure(ErrorKind.FORBIDDEN, "Access denied.")
    return Result.success(None)


def list_owned(db: Session, model: Any, user_id: int, *order_by: Any) -> list[Any]:
    stmt = select(model).where(model.user_id == user_id)
    if order_by:
        stmt = stmt.order_by(*order_by)
    return list(db.execute(stmt).scalars().all())


def get_owned(db: Session, model: Any, resource_id: int, user_id: int) -> Result[Any]:
    checked = check_ownership(db, model, resource_id, user_id)
    if not checked.ok:
        return checked
    row = db.get(model, resource_id)
    if row is None:
        # Deleted between the owner lookup and the full load
        return _not_found(model)
    return Result.success(row)


def commit_owned(
    db: Session,
    row: Any,
    *,
    conflict: ErrorKind | None = None,
    conflict_message: str | None = None,
) -> Result[Any]:
    """Commit pending changes to ``row`` and map expected store outcomes."""

    try:
        db.commit()
    except StaleDataError:
        # UPDATE matched no row: a concurrent delete won
        db.rollback()
        return _not_found(type(row))
    except IntegrityError:
        db.rollback()
        if conflict is None:
            raise
        return Result.failure(conflict, conflict_message)
    db.refresh(row)
    return Result.success(row)


def delete_owned(db: Session, model: Any, resource_id: int, user_id: int) -> Result[None]:
    checked = check_ownership(db, model, resource_id, user_id)
    if not checked.ok:
        return checked
    result = db.execute(delete(model).where(model.id == resource_id, model.user_id == user_id))
    db.commit()
    if not result.rowcount:
        return _not_found(model)
    return Result.success(None)
