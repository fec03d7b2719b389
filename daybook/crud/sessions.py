"""Session storage: opaque client token to user id, with a fixed lifetime.

A session is ``Active`` until its ``expires_at`` passes (checked lazily on
lookup) or it is destroyed by logout or account deletion. Neither of those
states can be left again.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.security import generate_session_token, hash_token
from ..models.session import UserSession
from ..models.user import User
from ..services.timecalc import expiry_iso, to_utc_iso, utcnow


def create_session(db: Session, user_id: int, now: datetime | None = None) -> str:
    """Persist a new session for ``user_id`` and return the plaintext token."""

    now = now or utcnow()
    token = generate_session_token()
    db.add(
        UserSession(
            token_hash=hash_token(token),
            user_id=user_id,
            created_at=to_utc_iso(now),
            expires_at=expiry_iso(now, settings.SESSION_TTL_DAYS),
        )
    )
    db.commit()
    return token


def resolve_session(db: Session, token: str | None, now: datetime | None = None) -> int | None:
    """Return the user id behind ``token`` or ``None``.

    One read, no writes. Expired rows and rows whose user has been deleted
    never resolve.
    """

    if not token:
        return None
    now = now or utcnow()
    stmt = (
        select(UserSession.user_id)
        .join(User, User.id == UserSession.user_id)
        .where(
            UserSession.token_hash == hash_token(token),
            UserSession.expires_at > to_utc_iso(now),
        )
    )
    return db.execute(stmt).scalar_one_or_none()


def destroy_session(db: Session, token: str | None) -> None:
    """Remove the session for ``token``. Unknown tokens are ignored."""

    if not token:
        return
    db.execute(delete(UserSession).where(UserSession.token_hash == hash_token(token)))
    db.commit()


def destroy_user_sessions(db: Session, user_id: int) -> int:
    result = db.execute(delete(UserSession).where(UserSession.user_id == user_id))
    db.commit()
    return result.rowcount or 0


def purge_expired_sessions(db: Session, now: datetime | None = None) -> int:
    now = now or utcnow()
    result = db.execute(delete(UserSession).where(UserSession.expires_at <= to_utc_iso(now)))
    db.commit()
    return result.rowcount or 0
