"""
Named counters persisted in the database.

Replaces process-local id counters so external ids survive restarts and
stay unique across instances.
"""

from sqlalchemy import Column, Integer, String

from event_buddy.db.base import Base


class Sequence(Base):
    __tablename__ = "sequences"

    name = Column(String(50), primary_key=True)
    value = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Sequence(name={self.name}, value={self.value})>"
