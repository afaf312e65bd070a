"""
User model. Credentials plus the legacy cart id carried into sessions.

Created events are linked through Event.creator_id and joined events through
EventMembership rows, so neither list can point at a missing event.
"""

from sqlalchemy import Column, Integer, String

from event_buddy.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    cart_id = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
