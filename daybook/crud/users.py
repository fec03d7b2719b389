"""Credential store: account creation, credential checks and account removal."""

from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.results import ErrorKind, Result
from ..core.security import burn_verification, hash_password, verify_password
from ..models.user import User
from ..services.timecalc import utcnow_iso
from .accounts import delete_account_cascade

DUPLICATE_MESSAGE = "This username or email is already in use."
INVALID_CREDENTIALS_MESSAGE = "Invalid username or password."


def _clean(value: str | None) -> str | None:
    cleaned = (value or "").strip()
    return cleaned or None


def _normalize_email(value: str | None) -> str | None:
    cleaned = _clean(value)
    return cleaned.lower() if cleaned else None


def find_by_identifier(db: Session, identifier: str) -> User | None:
    """Look up a login identifier. Emails contain ``@`` and usernames never do."""

    ident = (identifier or "").strip()
    if not ident:
        return None
    if "@" in ident:
        stmt = select(User).where(User.email == ident.lower())
    else:
        stmt = select(User).where(User.username == ident)
    return db.execute(stmt).scalar_one_or_none()


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def identifier_taken(db: Session, *identifiers: str | None) -> bool:
    """True when any value is already some user's username or email."""

    idents = [value for value in identifiers if value]
    if not idents:
        return False
    stmt = select(User.id).where(or_(User.username.in_(idents), User.email.in_(idents)))
    return db.execute(stmt).first() is not None


def create_account(
    db: Session,
    username: str,
    password: str,
    email: str | None = None,
    name: str | None = None,
) -> Result[User]:
    username = (username or "").strip()
    if not username:
        return Result.failure(ErrorKind.INVALID_INPUT, "username is required")
    if "@" in username:
        return Result.failure(ErrorKind.INVALID_INPUT, "username must not contain '@'")
    email = _normalize_email(email)

    if identifier_taken(db, username, email):
        return Result.failure(ErrorKind.DUPLICATE_IDENTIFIER, DUPLICATE_MESSAGE)

    user = User(
        username=username,
        email=email,
        name=_clean(name),
        password_hash=hash_password(password),
        created_at=utcnow_iso(),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent signup with the same identifier
        db.rollback()
        return Result.failure(ErrorKind.DUPLICATE_IDENTIFIER, DUPLICATE_MESSAGE)
    db.refresh(user)
    return Result.success(user)


def verify_credentials(db: Session, identifier: str, password: str) -> Result[User]:
    user = find_by_identifier(db, identifier)
    if user is None:
        burn_verification(password)
        return Result.failure(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)
    if not verify_password(password, user.password_hash):
        return Result.failure(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)
    return Result.success(user)


def delete_account(db: Session, user_id: int, token: str | None = None) -> Result[None]:
    return delete_account_cascade(db, user_id, token=token)
