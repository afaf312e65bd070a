"""
Pytest fixtures for test database, clients and signed-in users.

Tests run against SQLite through aiosqlite unless TEST_DATABASE_URL points
somewhere else. Tables are created and dropped per test for isolation, and
every HTTP client shares the test session through the get_db override.
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="event_buddy_test_")
TEST_DATABASE_URL = os.environ.get(
    "TEST_DATABASE_URL", f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
)

# Settings are read once, so configure the environment before importing the app
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("SESSION_BACKEND", "memory")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("UPLOAD_DIR", os.path.join(_TMP_DIR, "uploads"))

from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from event_buddy.main import app
from event_buddy.db.base import Base
from event_buddy.db.gateway import PersistenceGateway
from event_buddy.db.session import get_db
from event_buddy.core.security import hash_password
from event_buddy.models.user import User
from event_buddy.models.event import Event
from event_buddy.schemas.user import SessionData, SessionUser
from event_buddy.services.session_factory import close_session_store

TEST_PASSWORD = "testpassword123"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def gateway(db_session: AsyncSession) -> PersistenceGateway:
    return PersistenceGateway(db_session)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    await close_session_store()


@pytest_asyncio.fixture
async def other_client(client: AsyncClient) -> AsyncGenerator[AsyncClient, None]:
    """A second client with its own cookie jar, for a second user."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def create_user(db_session: AsyncSession, email: str) -> User:
    user = User(email=email, hashed_password=hash_password(TEST_PASSWORD), cart_id=0)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


async def sign_in(client: AsyncClient, email: str, password: str = TEST_PASSWORD) -> None:
    response = await client.get("/signin", params={"email": email, "pass": password})
    assert response.status_code == 200, response.text


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user in the database."""
    return await create_user(db_session, "test@example.com")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, "other@example.com")


@pytest_asyncio.fixture
async def auth_client(client: AsyncClient, test_user: User) -> AsyncClient:
    """Client signed in as test_user."""
    await sign_in(client, test_user.email)
    return client


@pytest_asyncio.fixture
async def other_auth_client(other_client: AsyncClient, other_user: User) -> AsyncClient:
    """Client signed in as other_user."""
    await sign_in(other_client, other_user.email)
    return other_client


def session_for(user: User) -> SessionData:
    return SessionData(user=SessionUser(email=user.email, cart_id=user.cart_id))


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, test_user: User) -> Event:
    """An event created by test_user, a month from now."""
    gw = PersistenceGateway(db_session)
    event = await gw.events.insert(
        our_id=str(await gw.next_sequence("event")),
        title="Test Meetup",
        description="A test event",
        location="Test Venue",
        date=datetime.now(timezone.utc) + timedelta(days=30),
        image="https://example.com/meetup.png",
        category="Technology",
        creator_id=test_user.id,
    )
    await db_session.commit()
    return event
