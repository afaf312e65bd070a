"""
Event model.

Key design decisions:
- `our_id` is the external key clients use; `id` never leaves the server
- `creator_id` is written in the same row as the event, so an event and its
  creator link cannot exist without each other
- Index on `date` for the sorted listing
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, CheckConstraint

from event_buddy.db.base import Base, TimestampMixin


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    our_id = Column(String(32), unique=True, index=True, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(String(2000), nullable=True)
    location = Column(String(255), nullable=True)
    date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    image = Column(String(1024), nullable=True)
    category = Column(String(100), nullable=True)
    max_attendees = Column(Integer, nullable=True)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("max_attendees IS NULL OR max_attendees > 0", name="check_max_attendees_positive"),
        Index("ix_events_date", "date"),
    )

    def __repr__(self) -> str:
        return f"<Event(our_id={self.our_id}, title={self.title})>"
