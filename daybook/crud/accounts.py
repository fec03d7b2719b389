"""Account removal: every owned row and the user row go in one transaction.

``OWNED_MODELS`` is the single list of tables that hold rows owned by a user.
A new owned resource type must be added here and nowhere else; dependents are
listed before anything they reference.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.results import ErrorKind, Result
from ..models.category import Category
from ..models.entry import Entry
from ..models.reflection import Reflection
from ..models.user import User
from .sessions import destroy_session, destroy_user_sessions

logger = logging.getLogger("daybook.accounts")

OWNED_MODELS = (Reflection, Category, Entry)


def delete_account_cascade(db: Session, user_id: int, token: str | None = None) -> Result[None]:
    removed: dict[str, int] = {}
    try:
        for model in OWNED_MODELS:
            result = db.execute(delete(model).where(model.user_id == user_id))
            removed[model.__tablename__] = result.rowcount or 0
        result = db.execute(delete(User).where(User.id == user_id))
        if not result.rowcount:
            db.rollback()
            return Result.failure(ErrorKind.NOT_FOUND, "Account not found.")
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("account.delete_failed", extra={"extra_data": {"user_id": user_id}})
        return Result.failure(ErrorKind.INTERNAL_FAILURE)
    except Exception:
        db.rollback()
        raise

    logger.info("account.deleted", extra={"extra_data": {"user_id": user_id, "removed": removed}})
    _teardown_sessions(db, user_id, token)
    return Result.success(None)


def _teardown_sessions(db: Session, user_id: int, token: str | None) -> None:
    # Sessions live outside the account transaction; the account is already gone.
    try:
        destroy_session(db, token)
        destroy_user_sessions(db, user_id)
    except SQLAlchemyError:
        db.rollback()
        logger.warning(
            "session.teardown_failed",
            exc_info=True,
            extra={"extra_data": {"user_id": user_id}},
        )
