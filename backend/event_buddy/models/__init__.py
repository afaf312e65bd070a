from event_buddy.models.user import User
from event_buddy.models.event import Event
from event_buddy.models.membership import EventMembership
from event_buddy.models.sequence import Sequence

__all__ = ["User", "Event", "EventMembership", "Sequence"]
