"""Persisted login sessions.

Only the SHA-256 digest of the client token is stored. ``user_id`` carries no
foreign key: session storage is kept apart from the account tables, and a row
whose user has been deleted simply stops resolving.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, Text

from ..db.session import Base


class UserSession(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    token_hash = Column(Text, nullable=False, unique=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    created_at = Column(Text, nullable=False)
    expires_at = Column(Text, nullable=False, index=True)


__all__ = ["UserSession"]
