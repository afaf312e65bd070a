"""
Event endpoints. Reads are open except the detail view; writes need a
session and update/delete are creator-only.
"""

from fastapi import APIRouter, Depends, Query, status

from event_buddy.api.deps import parse_fields, request_fields, require_session
from event_buddy.db.gateway import PersistenceGateway, get_gateway
from event_buddy.schemas.common import MessageResponse
from event_buddy.schemas.event import (
    EventCreate,
    EventDetailEnvelope,
    EventEnvelope,
    EventListEnvelope,
    EventRef,
    EventResponse,
    EventUpdate,
)
from event_buddy.schemas.user import SessionData
from event_buddy.services.event_service import (
    create_event,
    delete_event,
    get_event_for_viewer,
    list_events,
    list_events_by_date,
    update_event,
)

router = APIRouter(tags=["Events"])


@router.api_route("/", methods=["GET", "POST"], response_model=EventListEnvelope)
async def list_events_endpoint(gw: PersistenceGateway = Depends(get_gateway)):
    """All events in creation order."""
    events = await list_events(gw)
    return EventListEnvelope(events=[EventResponse.model_validate(e) for e in events])


@router.api_route("/getSpecificEvent", methods=["GET", "POST"], response_model=EventDetailEnvelope)
async def get_event_endpoint(
    session: SessionData = Depends(require_session),
    fields: dict = Depends(request_fields),
    gw: PersistenceGateway = Depends(get_gateway),
):
    """One event by `ourId`, with the caller's registration state."""
    ref = parse_fields(EventRef, fields)
    detail = await get_event_for_viewer(gw, session, ref.our_id)
    return EventDetailEnvelope(event=detail)


@router.get("/sortedEvents", response_model=EventListEnvelope)
async def sorted_events_endpoint(
    ascending: bool = Query(True),
    gw: PersistenceGateway = Depends(get_gateway),
):
    """Events ordered by start date."""
    events = await list_events_by_date(gw, ascending=ascending)
    return EventListEnvelope(events=[EventResponse.model_validate(e) for e in events])


@router.post("/addEvent", response_model=EventEnvelope, status_code=status.HTTP_201_CREATED)
async def add_event_endpoint(
    session: SessionData = Depends(require_session),
    fields: dict = Depends(request_fields),
    gw: PersistenceGateway = Depends(get_gateway),
):
    """Create an event owned by the caller."""
    event = await create_event(gw, session, parse_fields(EventCreate, fields))
    return EventEnvelope(event=EventResponse.model_validate(event))


@router.api_route("/updateSpecificEvent", methods=["GET", "POST"], response_model=EventEnvelope)
async def update_event_endpoint(
    session: SessionData = Depends(require_session),
    fields: dict = Depends(request_fields),
    gw: PersistenceGateway = Depends(get_gateway),
):
    """Patch the event named by `ourId` with the other supplied fields."""
    ref = parse_fields(EventRef, fields)
    patch = parse_fields(EventUpdate, {k: v for k, v in fields.items() if k not in ("ourId", "our_id")})
    event = await update_event(gw, session, ref.our_id, patch)
    return EventEnvelope(event=EventResponse.model_validate(event))


@router.api_route("/deleteSpecificEvent", methods=["GET", "POST"], response_model=MessageResponse)
async def delete_event_endpoint(
    session: SessionData = Depends(require_session),
    fields: dict = Depends(request_fields),
    gw: PersistenceGateway = Depends(get_gateway),
):
    ref = parse_fields(EventRef, fields)
    await delete_event(gw, session, ref.our_id)
    return MessageResponse(message=f"Event {ref.our_id} deleted")
