"""
EventMembership: one row per (user, event) the user has joined.

Row order by created_at is the user's joinedEvents order. The unique
constraint backs the AlreadyJoined check at the database level.
"""

from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint

from event_buddy.db.base import Base, TimestampMixin


class EventMembership(Base, TimestampMixin):
    __tablename__ = "event_memberships"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_user_event_membership"),
    )

    def __repr__(self) -> str:
        return f"<EventMembership(user={self.user_id}, event={self.event_id})>"
