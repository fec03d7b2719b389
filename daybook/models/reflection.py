"""Free-text note attached to a calendar day."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, Text

from ..db.session import Base


class Reflection(Base):
    __tablename__ = "reflections"

    resource_label = "Reflection"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Text, nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=True)


__all__ = ["Reflection"]
