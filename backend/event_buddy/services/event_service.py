"""
Event service handling CRUD operations and creator-only writes.
"""

from event_buddy.core.config import get_settings
from event_buddy.core.exceptions import Forbidden, InvalidInput, NotFound
from event_buddy.core.logging import get_logger
from event_buddy.core.metrics import record_event_operation
from event_buddy.db.gateway import PersistenceGateway
from event_buddy.models.event import Event
from event_buddy.schemas.event import EventCreate, EventDetail, EventUpdate, as_utc
from event_buddy.schemas.user import SessionData
from event_buddy.services.auth_service import get_session_user

logger = get_logger(__name__)

EVENT_SEQUENCE = "event"


def _image_or_default(image) -> str:
    if image is None or not str(image).strip():
        return get_settings().DEFAULT_EVENT_IMAGE
    return image


async def create_event(gw: PersistenceGateway, session: SessionData, event_data: EventCreate) -> Event:
    """
    Create an event owned by the session user.
    The creator link is a column of the event row, so both land in one write.
    """
    creator = await get_session_user(gw, session)
    our_id = str(await gw.next_sequence(EVENT_SEQUENCE))

    event = await gw.events.insert(
        our_id=our_id,
        title=event_data.title,
        description=event_data.description,
        location=event_data.location,
        date=event_data.date,
        end_date=event_data.end_date,
        image=_image_or_default(event_data.image),
        category=event_data.category,
        max_attendees=event_data.max_attendees,
        creator_id=creator.id,
    )

    record_event_operation("create")
    logger.info("event_created", our_id=event.our_id, title=event.title, creator_id=creator.id)
    return event


async def get_event(gw: PersistenceGateway, our_id: str) -> Event:
    """Get a single event by external id."""
    event = await gw.events.find_one(our_id=our_id)
    if not event:
        raise NotFound(f"Event {our_id} not found")
    return event


async def get_event_for_viewer(gw: PersistenceGateway, session: SessionData, our_id: str) -> EventDetail:
    """Event plus what the session user needs to render its detail screen."""
    event = await get_event(gw, our_id)
    viewer = await get_session_user(gw, session)

    registered = await gw.memberships.find_one(user_id=viewer.id, event_id=event.id) is not None
    attendee_count = await gw.memberships.count(event_id=event.id)

    return EventDetail.model_validate(event).model_copy(update={
        "attendee_count": attendee_count,
        "is_owner": event.creator_id == viewer.id,
        "is_user_registered": registered,
    })


async def list_events(gw: PersistenceGateway) -> list[Event]:
    return await gw.events.find(order_by=[Event.id.asc()])


async def list_events_by_date(gw: PersistenceGateway, ascending: bool = True) -> list[Event]:
    """Events ordered by start date. Undated events always come last."""
    date_order = Event.date.asc() if ascending else Event.date.desc()
    return await gw.events.find(order_by=[date_order.nulls_last(), Event.id.asc()])


async def _owned_event(gw: PersistenceGateway, session: SessionData, our_id: str, action: str) -> Event:
    event = await get_event(gw, our_id)
    user = await get_session_user(gw, session)
    if event.creator_id != user.id:
        logger.warning(f"event_{action}_forbidden", our_id=our_id, user_id=user.id)
        raise Forbidden(f"Only the creator can {action} this event")
    return event


async def update_event(
    gw: PersistenceGateway,
    session: SessionData,
    our_id: str,
    patch: EventUpdate,
) -> Event:
    """
    Apply the fields present in `patch`. Creator only.
    All checks run before any attribute is touched.
    """
    event = await _owned_event(gw, session, our_id, "update")
    changes = patch.model_dump(exclude_unset=True)

    if "image" in changes:
        changes["image"] = _image_or_default(changes["image"])

    start = as_utc(changes.get("date", event.date))
    end = as_utc(changes.get("end_date", event.end_date))
    if start and end and end < start:
        raise InvalidInput("endDate must not be before date")

    if not changes:
        return event

    event = await gw.events.save(event, **changes)

    record_event_operation("update")
    logger.info("event_updated", our_id=our_id, fields=sorted(changes))
    return event


async def delete_event(gw: PersistenceGateway, session: SessionData, our_id: str) -> None:
    """
    Delete an event. Creator only.
    Memberships pointing at it go in the same transaction.
    """
    event = await _owned_event(gw, session, our_id, "delete")

    pruned = await gw.memberships.delete(event_id=event.id)
    await gw.events.remove(event)

    record_event_operation("delete")
    logger.info("event_deleted", our_id=our_id, memberships_pruned=pruned)
