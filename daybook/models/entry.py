"""A block of tracked time."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, Text

from ..core.config import settings
from ..db.session import Base
from ..services.timecalc import compute_minutes


class Entry(Base):
    __tablename__ = "entries"

    resource_label = "Entry"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    activity_name = Column(Text, nullable=False)
    category = Column(Text, nullable=True)
    energy = Column(Integer, nullable=True)
    intent = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=True)

    @property
    def duration_minutes(self) -> int:
        return compute_minutes(self.start_time, self.end_time, settings.TZ)


__all__ = ["Entry"]
