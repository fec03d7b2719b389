"""Account holder. Owned rows point back here through ``user_id``; there are no forward collections."""

from __future__ import annotations

from sqlalchemy import Column, Integer, Text

from ..db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(Text, nullable=False, unique=True, index=True)
    email = Column(Text, nullable=True, unique=True, index=True)
    name = Column(Text, nullable=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r})>"


__all__ = ["User"]
