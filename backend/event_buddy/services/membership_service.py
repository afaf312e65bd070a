"""
Membership service: join and leave events, list created and joined events.

CAPACITY
========

A join locks the event row (Postgres SELECT ... FOR UPDATE) and then
inserts with a single INSERT ... SELECT that only matches while the event
is below max_attendees. Zero rows inserted means the event is full. The
unique (user, event) constraint turns a duplicate join that slipped past
the membership check into AlreadyJoined.

WRITE VERIFICATION
==================

Every join/leave writes the membership change, flushes it, then reads the
row back from the database with a fresh query. If the read does not show
the change, the request fails with PersistenceInconsistency instead of
assuming the write will become visible later. The transaction is rolled
back by the request session on that error, so nothing half-applied is
committed.
"""

from event_buddy.core.exceptions import (
    AlreadyJoined,
    Conflict,
    EventFull,
    NotFound,
    NotJoined,
    OwnerCannotJoin,
    PersistenceInconsistency,
)
from event_buddy.core.logging import get_logger
from event_buddy.core.metrics import record_membership_change
from event_buddy.db.gateway import PersistenceGateway
from event_buddy.models.event import Event
from event_buddy.schemas.user import SessionData
from event_buddy.services.auth_service import get_session_user
from event_buddy.services.event_service import get_event

logger = get_logger(__name__)


async def join_event(gw: PersistenceGateway, session: SessionData, our_id: str) -> Event:
    user = await get_session_user(gw, session)
    event = await get_event(gw, our_id)

    # Creators never join their own event, whatever the membership state
    if event.creator_id == user.id:
        record_membership_change("join", "rejected")
        raise OwnerCannotJoin()

    # Joins for one event queue on its row lock until the holder commits
    event = await gw.events.find_one(fresh=True, for_update=True, id=event.id)
    if event is None:
        raise NotFound(f"Event {our_id} not found")

    if await gw.memberships.find_one(user_id=user.id, event_id=event.id):
        record_membership_change("join", "rejected")
        raise AlreadyJoined()

    try:
        placed = await gw.add_membership_if_room(user.id, event)
    except Conflict as e:
        # A concurrent join by the same user landed first
        record_membership_change("join", "rejected")
        raise AlreadyJoined() from e

    if not placed:
        record_membership_change("join", "rejected")
        logger.info("event_join_full", our_id=our_id, max_attendees=event.max_attendees)
        raise EventFull()

    confirmed = await gw.memberships.find_one(fresh=True, user_id=user.id, event_id=event.id)
    if confirmed is None:
        record_membership_change("join", "inconsistent")
        logger.error("membership_verification_failed", action="join", our_id=our_id, user_id=user.id)
        raise PersistenceInconsistency("Failed to join the event, please try again")

    record_membership_change("join", "success")
    logger.info("event_joined", our_id=our_id, user_id=user.id)
    return event


async def leave_event(gw: PersistenceGateway, session: SessionData, our_id: str) -> Event:
    user = await get_session_user(gw, session)
    event = await get_event(gw, our_id)

    if not await gw.memberships.find_one(user_id=user.id, event_id=event.id):
        record_membership_change("leave", "rejected")
        raise NotJoined()

    await gw.memberships.delete(user_id=user.id, event_id=event.id)

    still_there = await gw.memberships.find_one(fresh=True, user_id=user.id, event_id=event.id)
    if still_there is not None:
        record_membership_change("leave", "inconsistent")
        logger.error("membership_verification_failed", action="leave", our_id=our_id, user_id=user.id)
        raise PersistenceInconsistency("Failed to leave the event, please try again")

    record_membership_change("leave", "success")
    logger.info("event_left", our_id=our_id, user_id=user.id)
    return event


async def list_created_events(gw: PersistenceGateway, session: SessionData) -> list[Event]:
    user = await get_session_user(gw, session)
    return await gw.created_events(user.id)


async def list_joined_events(gw: PersistenceGateway, session: SessionData) -> list[Event]:
    user = await get_session_user(gw, session)
    return await gw.joined_events(user.id)
