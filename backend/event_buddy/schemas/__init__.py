from event_buddy.schemas.common import Envelope, MessageResponse, ErrorResponse
from event_buddy.schemas.user import (
    Credentials, SessionUser, SessionData, SignupResponse, SigninResponse, SignoutResponse,
)
from event_buddy.schemas.event import (
    EventRef, EventCreate, EventUpdate, EventResponse, EventDetail,
    EventEnvelope, EventDetailEnvelope, EventListEnvelope,
    CreatedEventsEnvelope, JoinedEventsEnvelope, MembershipResponse,
    UploadResponse, SuggestionRequest, SuggestionResponse,
)

__all__ = [
    "Envelope", "MessageResponse", "ErrorResponse",
    "Credentials", "SessionUser", "SessionData",
    "SignupResponse", "SigninResponse", "SignoutResponse",
    "EventRef", "EventCreate", "EventUpdate", "EventResponse", "EventDetail",
    "EventEnvelope", "EventDetailEnvelope", "EventListEnvelope",
    "CreatedEventsEnvelope", "JoinedEventsEnvelope", "MembershipResponse",
    "UploadResponse", "SuggestionRequest", "SuggestionResponse",
]
