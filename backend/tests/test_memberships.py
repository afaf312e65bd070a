"""
Tests for join/leave and the created/joined event lists.
"""

import asyncio

import pytest
from httpx import AsyncClient, ASGITransport

from event_buddy.core.exceptions import AlreadyJoined, AppError, PersistenceInconsistency
from event_buddy.db.gateway import PersistenceGateway
from event_buddy.main import app
from event_buddy.services.membership_service import join_event, leave_event

from conftest import TestSessionLocal, create_user, session_for, sign_in


@pytest.mark.asyncio
async def test_join_leave_scenario(auth_client: AsyncClient, other_auth_client: AsyncClient):
    """A creates, B joins, B rejoins (rejected), B leaves, B's list is empty."""
    created = await auth_client.post("/addEvent", json={"title": "Meetup"})
    our_id = created.json()["event"]["ourId"]

    joined = await other_auth_client.post("/joinEvent", json={"ourId": our_id})
    assert joined.status_code == 200
    assert joined.json()["event"]["ourId"] == our_id

    rejoined = await other_auth_client.post("/joinEvent", json={"ourId": our_id})
    assert rejoined.status_code == 409
    assert rejoined.json()["error"] == "AlreadyJoined"

    left = await other_auth_client.post("/leaveEvent", json={"ourId": our_id})
    assert left.status_code == 200

    joined_list = await other_auth_client.get("/myJoinedEvents")
    assert joined_list.json() == {"success": True, "joinedEvents": []}


@pytest.mark.asyncio
async def test_join_lists_event_once(auth_client, other_auth_client: AsyncClient, test_event):
    await other_auth_client.post("/joinEvent", json={"ourId": test_event.our_id})

    response = await other_auth_client.get("/myJoinedEvents")
    our_ids = [e["ourId"] for e in response.json()["joinedEvents"]]
    assert our_ids == [test_event.our_id]

    detail = await other_auth_client.get("/getSpecificEvent", params={"ourId": test_event.our_id})
    assert detail.json()["event"]["isUserRegistered"] is True
    assert detail.json()["event"]["attendeeCount"] == 1


@pytest.mark.asyncio
async def test_join_accepts_numeric_id(auth_client, other_auth_client: AsyncClient, test_event):
    response = await other_auth_client.post("/joinEvent", json={"ourId": int(test_event.our_id)})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_join_then_leave_restores_state(auth_client, other_auth_client: AsyncClient, test_event):
    before = (await other_auth_client.get("/myJoinedEvents")).json()

    await other_auth_client.post("/joinEvent", json={"ourId": test_event.our_id})
    await other_auth_client.post("/leaveEvent", json={"ourId": test_event.our_id})

    after = (await other_auth_client.get("/myJoinedEvents")).json()
    assert after == before


@pytest.mark.asyncio
async def test_owner_cannot_join(auth_client: AsyncClient, test_event):
    """Joining one's own event fails, and keeps failing."""
    for _ in range(2):
        response = await auth_client.post("/joinEvent", json={"ourId": test_event.our_id})
        assert response.status_code == 409
        assert response.json()["error"] == "OwnerCannotJoin"

    joined_list = await auth_client.get("/myJoinedEvents")
    assert joined_list.json()["joinedEvents"] == []


@pytest.mark.asyncio
async def test_leave_without_joining(auth_client, other_auth_client: AsyncClient, test_event):
    response = await other_auth_client.post("/leaveEvent", json={"ourId": test_event.our_id})
    assert response.status_code == 409
    assert response.json()["error"] == "NotJoined"


@pytest.mark.asyncio
async def test_join_unknown_event(auth_client: AsyncClient):
    response = await auth_client.post("/joinEvent", json={"ourId": "404"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_join_requires_session(client: AsyncClient, test_event):
    response = await client.post("/joinEvent", json={"ourId": test_event.our_id})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_join_full_event(auth_client, other_auth_client: AsyncClient, db_session):
    created = await auth_client.post("/addEvent", json={"title": "Tiny", "maxAttendees": 1})
    our_id = created.json()["event"]["ourId"]

    first = await other_auth_client.post("/joinEvent", json={"ourId": our_id})
    assert first.status_code == 200

    late_user = await create_user(db_session, "late@example.com")
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as late_client:
        await sign_in(late_client, late_user.email)
        response = await late_client.post("/joinEvent", json={"ourId": our_id})

    assert response.status_code == 409
    assert response.json()["error"] == "EventFull"


@pytest.mark.asyncio
async def test_created_events_in_creation_order(auth_client: AsyncClient):
    for title in ("One", "Two", "Three"):
        await auth_client.post("/addEvent", json={"title": title})

    response = await auth_client.get("/myCreatedEvents")
    assert [e["title"] for e in response.json()["createdEvents"]] == ["One", "Two", "Three"]


@pytest.mark.asyncio
async def test_joined_events_in_join_order(auth_client, other_auth_client: AsyncClient):
    ids = []
    for title in ("A", "B", "C"):
        created = await auth_client.post("/addEvent", json={"title": title})
        ids.append(created.json()["event"]["ourId"])

    for our_id in reversed(ids):
        await other_auth_client.post("/joinEvent", json={"ourId": our_id})

    response = await other_auth_client.get("/myJoinedEvents")
    assert [e["title"] for e in response.json()["joinedEvents"]] == ["C", "B", "A"]


@pytest.mark.asyncio
async def test_join_fails_when_write_is_not_visible(gateway: PersistenceGateway, other_user, test_event, monkeypatch):
    """A join whose read-back misses the new row is reported, not assumed."""
    find_one = gateway.memberships.find_one

    async def lossy_find_one(*, fresh=False, **filters):
        if fresh:
            return None
        return await find_one(fresh=fresh, **filters)

    monkeypatch.setattr(gateway.memberships, "find_one", lossy_find_one)

    with pytest.raises(PersistenceInconsistency):
        await join_event(gateway, session_for(other_user), test_event.our_id)


@pytest.mark.asyncio
async def test_leave_fails_when_row_survives(gateway: PersistenceGateway, other_user, test_event, monkeypatch):
    await join_event(gateway, session_for(other_user), test_event.our_id)

    async def sticky_delete(**filters):
        return 0

    monkeypatch.setattr(gateway.memberships, "delete", sticky_delete)

    with pytest.raises(PersistenceInconsistency):
        await leave_event(gateway, session_for(other_user), test_event.our_id)


async def join_in_own_session(user, our_id: str) -> str:
    """Run one join in its own transaction, like a separate request."""
    async with TestSessionLocal() as session:
        try:
            await join_event(PersistenceGateway(session), session_for(user), our_id)
        except AppError as e:
            await session.rollback()
            return e.code
        await session.commit()
        return "joined"


@pytest.mark.asyncio
async def test_concurrent_joins_respect_capacity(db_session, gateway: PersistenceGateway, test_user, other_user):
    """Two users racing for the last place: one joins, one gets EventFull."""
    third_user = await create_user(db_session, "third@example.com")
    event = await gateway.events.insert(
        our_id=str(await gateway.next_sequence("event")),
        title="One Seat",
        max_attendees=1,
        creator_id=test_user.id,
    )
    await db_session.commit()

    results = await asyncio.gather(
        join_in_own_session(other_user, event.our_id),
        join_in_own_session(third_user, event.our_id),
    )

    assert sorted(results) == ["EventFull", "joined"]
    assert await gateway.memberships.count(event_id=event.id) == 1


@pytest.mark.asyncio
async def test_concurrent_joins_by_same_user(gateway: PersistenceGateway, other_user, test_event):
    results = await asyncio.gather(
        join_in_own_session(other_user, test_event.our_id),
        join_in_own_session(other_user, test_event.our_id),
    )

    assert sorted(results) == ["AlreadyJoined", "joined"]
    assert await gateway.memberships.count(event_id=test_event.id) == 1


@pytest.mark.asyncio
async def test_duplicate_insert_reported_as_already_joined(
    gateway: PersistenceGateway, other_user, test_event, monkeypatch
):
    """A duplicate that passes the membership check is caught by the unique constraint."""
    await join_event(gateway, session_for(other_user), test_event.our_id)

    async def stale_find_one(*, fresh=False, **filters):
        return None

    monkeypatch.setattr(gateway.memberships, "find_one", stale_find_one)

    with pytest.raises(AlreadyJoined):
        await join_event(gateway, session_for(other_user), test_event.our_id)
