"""
Tests for the memory and Redis session stores and the store factory.
"""

from types import SimpleNamespace

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from event_buddy.core.config import get_settings
from event_buddy.core.exceptions import ServiceUnavailable
from event_buddy.schemas.user import SessionData, SessionUser
from event_buddy.services import memory_session_store
from event_buddy.services.memory_session_store import MemorySessionStore
from event_buddy.services.redis_session_store import KEY_PREFIX, RedisSessionStore
from event_buddy.services.session_factory import build_session_store


def make_session(email: str = "a@example.com") -> SessionData:
    return SessionData(user=SessionUser(email=email))


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the session store."""

    def __init__(self):
        self.values: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def setex(self, key, ttl, value):
        self.values[key] = value
        self.ttls[key] = ttl
        return True

    async def get(self, key):
        return self.values.get(key)

    async def delete(self, key):
        return 1 if self.values.pop(key, None) is not None else 0


class BrokenRedis:
    async def setex(self, key, ttl, value):
        raise RedisConnectionError("connection refused")

    async def get(self, key):
        raise RedisConnectionError("connection refused")

    async def delete(self, key):
        raise RedisConnectionError("connection refused")


@pytest.mark.asyncio
async def test_memory_store_round_trip():
    store = MemorySessionStore(ttl_seconds=60)
    token = await store.create(make_session())

    session = await store.get(token)
    assert session is not None
    assert session.is_logged_in is True
    assert session.user.email == "a@example.com"

    assert await store.delete(token) is True
    assert await store.get(token) is None
    assert await store.delete(token) is False


@pytest.mark.asyncio
async def test_memory_store_unknown_token():
    store = MemorySessionStore()
    assert await store.get("missing") is None


@pytest.mark.asyncio
async def test_memory_store_expires_sessions(monkeypatch):
    clock = SimpleNamespace(now=1000.0)
    monkeypatch.setattr(memory_session_store, "time", SimpleNamespace(monotonic=lambda: clock.now))

    store = MemorySessionStore(ttl_seconds=30)
    token = await store.create(make_session())
    assert await store.get(token) is not None

    clock.now += 31
    assert await store.get(token) is None


@pytest.mark.asyncio
async def test_memory_store_close_drops_sessions():
    store = MemorySessionStore()
    token = await store.create(make_session())
    await store.close()
    assert await store.get(token) is None


@pytest.mark.asyncio
async def test_redis_store_round_trip():
    fake = FakeRedis()
    store = RedisSessionStore(client=fake, ttl_seconds=120)

    token = await store.create(make_session("b@example.com"))
    assert fake.ttls[KEY_PREFIX + token] == 120

    session = await store.get(token)
    assert session.user.email == "b@example.com"

    assert await store.delete(token) is True
    assert await store.get(token) is None


@pytest.mark.asyncio
async def test_redis_store_stores_camel_case_payload():
    fake = FakeRedis()
    store = RedisSessionStore(client=fake)
    token = await store.create(make_session())
    assert '"isLoggedIn":true' in fake.values[KEY_PREFIX + token]


@pytest.mark.asyncio
async def test_redis_store_outage_is_service_unavailable():
    store = RedisSessionStore(client=BrokenRedis())

    with pytest.raises(ServiceUnavailable):
        await store.create(make_session())
    with pytest.raises(ServiceUnavailable):
        await store.get("token")


def test_factory_builds_configured_backend(monkeypatch):
    settings = get_settings()

    monkeypatch.setattr(settings, "SESSION_BACKEND", "memory")
    assert isinstance(build_session_store(), MemorySessionStore)

    monkeypatch.setattr(settings, "SESSION_BACKEND", "Redis")
    assert isinstance(build_session_store(), RedisSessionStore)


def test_factory_rejects_unknown_backend(monkeypatch):
    monkeypatch.setattr(get_settings(), "SESSION_BACKEND", "memcached")
    with pytest.raises(ValueError):
        build_session_store()
