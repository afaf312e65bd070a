"""
Pydantic schemas for event-related request/response validation.
Keys are camelCase on the wire (`ourId`, `endDate`, `maxAttendees`).
"""

from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AliasChoices, Field, StringConstraints, field_validator, model_validator

from event_buddy.schemas.common import CamelModel, Envelope, MessageResponse

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive timestamps are taken to be UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class EventRef(CamelModel):
    our_id: str = Field(..., min_length=1, max_length=32)

    @field_validator("our_id", mode="before")
    @classmethod
    def stringify(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class EventFields(CamelModel):
    description: Optional[str] = Field(None, max_length=2000)
    location: Optional[str] = Field(None, max_length=255)
    date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    image: Optional[str] = Field(
        None,
        max_length=1024,
        validation_alias=AliasChoices("image", "imageUrl", "image_url"),
    )
    category: Optional[str] = Field(None, max_length=100)
    max_attendees: Optional[int] = Field(None, gt=0, le=1_000_000)

    @field_validator("date", "end_date")
    @classmethod
    def normalize_timestamp(cls, value):
        return as_utc(value)

    @model_validator(mode="after")
    def check_date_order(self):
        if self.date and self.end_date and self.end_date < self.date:
            raise ValueError("endDate must not be before date")
        return self


class EventCreate(EventFields):
    title: Title


class EventUpdate(EventFields):
    title: Optional[Title] = None

    @field_validator("title", mode="before")
    @classmethod
    def title_not_null(cls, value):
        if value is None:
            raise ValueError("title cannot be empty")
        return value


class EventResponse(CamelModel):
    our_id: str
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    image: Optional[str] = None
    category: Optional[str] = None
    max_attendees: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class EventDetail(EventResponse):
    attendee_count: int = 0
    is_owner: bool = False
    is_user_registered: bool = False


class EventEnvelope(Envelope):
    event: EventResponse


class EventDetailEnvelope(Envelope):
    event: EventDetail


class EventListEnvelope(Envelope):
    events: list[EventResponse]


class CreatedEventsEnvelope(Envelope):
    created_events: list[EventResponse]


class JoinedEventsEnvelope(Envelope):
    joined_events: list[EventResponse]


class MembershipResponse(MessageResponse):
    event: EventResponse


class UploadResponse(Envelope):
    image_url: str
    filename: str


class SuggestionRequest(CamelModel):
    description: str = Field(..., min_length=1, max_length=2000)
    category: Optional[str] = Field(None, max_length=100)


class SuggestionResponse(Envelope):
    title: str
