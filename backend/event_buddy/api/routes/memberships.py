"""
Membership endpoints: join/leave and the caller's event lists.
"""

from fastapi import APIRouter, Depends

from event_buddy.api.deps import parse_fields, request_fields, require_session
from event_buddy.db.gateway import PersistenceGateway, get_gateway
from event_buddy.schemas.event import (
    CreatedEventsEnvelope,
    EventRef,
    EventResponse,
    JoinedEventsEnvelope,
    MembershipResponse,
)
from event_buddy.schemas.user import SessionData
from event_buddy.services.membership_service import (
    join_event,
    leave_event,
    list_created_events,
    list_joined_events,
)

router = APIRouter(tags=["Memberships"])


@router.post("/joinEvent", response_model=MembershipResponse)
async def join_event_endpoint(
    session: SessionData = Depends(require_session),
    fields: dict = Depends(request_fields),
    gw: PersistenceGateway = Depends(get_gateway),
):
    ref = parse_fields(EventRef, fields)
    event = await join_event(gw, session, ref.our_id)
    return MembershipResponse(message="Joined event", event=EventResponse.model_validate(event))


@router.post("/leaveEvent", response_model=MembershipResponse)
async def leave_event_endpoint(
    session: SessionData = Depends(require_session),
    fields: dict = Depends(request_fields),
    gw: PersistenceGateway = Depends(get_gateway),
):
    ref = parse_fields(EventRef, fields)
    event = await leave_event(gw, session, ref.our_id)
    return MembershipResponse(message="Left event", event=EventResponse.model_validate(event))


@router.get("/myCreatedEvents", response_model=CreatedEventsEnvelope)
async def my_created_events_endpoint(
    session: SessionData = Depends(require_session),
    gw: PersistenceGateway = Depends(get_gateway),
):
    events = await list_created_events(gw, session)
    return CreatedEventsEnvelope(created_events=[EventResponse.model_validate(e) for e in events])


@router.get("/myJoinedEvents", response_model=JoinedEventsEnvelope)
async def my_joined_events_endpoint(
    session: SessionData = Depends(require_session),
    gw: PersistenceGateway = Depends(get_gateway),
):
    events = await list_joined_events(gw, session)
    return JoinedEventsEnvelope(joined_events=[EventResponse.model_validate(e) for e in events])
