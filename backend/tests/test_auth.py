"""
Tests for account endpoints: signup, signin, signout and the session gate.
"""

import pytest
from httpx import AsyncClient

from event_buddy.core.config import get_settings
from event_buddy.services.session_factory import get_session_store


@pytest.mark.asyncio
async def test_signup(client: AsyncClient):
    """Signup with query parameters creates an account."""
    response = await client.get("/signup", params={"email": "new@example.com", "pass": "p1"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert "hashed_password" not in data


@pytest.mark.asyncio
async def test_signup_does_not_start_session(client: AsyncClient):
    await client.get("/signup", params={"email": "new@example.com", "pass": "p1"})
    assert get_settings().SESSION_COOKIE_NAME not in client.cookies

    response = await client.get("/myCreatedEvents")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_signup_with_json_body(client: AsyncClient):
    """POST variant accepts `password` as well as `pass`."""
    response = await client.post("/signup", json={"email": "json@example.com", "password": "secret"})
    assert response.status_code == 200
    assert response.json()["success"] is True


@pytest.mark.asyncio
async def test_signup_duplicate_email(client: AsyncClient, gateway):
    """Second signup with the same email is rejected and leaves one user."""
    params = {"email": "dup@example.com", "pass": "p1"}
    first = await client.get("/signup", params=params)
    second = await client.get("/signup", params=params)

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json() == {
        "success": False,
        "message": "Email already registered",
        "error": "DuplicateAccount",
    }
    assert await gateway.users.count(email="dup@example.com") == 1


@pytest.mark.asyncio
async def test_signup_missing_password(client: AsyncClient):
    response = await client.get("/signup", params={"email": "nopass@example.com"})
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "InvalidInput"


@pytest.mark.asyncio
async def test_signup_invalid_email(client: AsyncClient):
    response = await client.get("/signup", params={"email": "not-an-email", "pass": "p1"})
    assert response.status_code == 400
    assert response.json()["message"].startswith("email")


@pytest.mark.asyncio
async def test_signin_success(client: AsyncClient, test_user):
    """Valid credentials start a session cookie."""
    response = await client.get("/signin", params={"email": test_user.email, "pass": "testpassword123"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["login"] is True
    assert data["user"] == {"email": test_user.email, "cartId": 0}
    assert get_settings().SESSION_COOKIE_NAME in response.cookies


@pytest.mark.asyncio
async def test_signin_failures_are_indistinguishable(client: AsyncClient, test_user):
    """Unknown email and wrong password give the same answer."""
    wrong_password = await client.get("/signin", params={"email": test_user.email, "pass": "wrong"})
    unknown_email = await client.get("/signin", params={"email": "nobody@example.com", "pass": "wrong"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_signup_signin_scenario(client: AsyncClient):
    await client.get("/signup", params={"email": "a@example.com", "pass": "p1"})

    ok = await client.get("/signin", params={"email": "a@example.com", "pass": "p1"})
    assert ok.status_code == 200
    assert ok.json()["login"] is True

    bad = await client.get("/signin", params={"email": "a@example.com", "pass": "wrong"})
    assert bad.status_code == 401
    assert bad.json()["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_signin_rotates_existing_session(client: AsyncClient, test_user):
    cookie_name = get_settings().SESSION_COOKIE_NAME
    await client.get("/signin", params={"email": test_user.email, "pass": "testpassword123"})
    first_token = client.cookies[cookie_name]

    await client.get("/signin", params={"email": test_user.email, "pass": "testpassword123"})
    second_token = client.cookies[cookie_name]

    store = get_session_store()
    assert first_token != second_token
    assert await store.get(first_token) is None
    assert await store.get(second_token) is not None


@pytest.mark.asyncio
async def test_signout(auth_client: AsyncClient):
    """Signout ends the session and is safe to repeat."""
    response = await auth_client.get("/signout")
    assert response.status_code == 200
    assert response.json() == {"success": True, "wasLoggedIn": True}

    protected = await auth_client.get("/myCreatedEvents")
    assert protected.status_code == 401

    again = await auth_client.get("/signout")
    assert again.json() == {"success": True, "wasLoggedIn": False}


@pytest.mark.asyncio
async def test_session_gate_rejects_anonymous(client: AsyncClient):
    response = await client.post("/addEvent", json={"title": "Nope"})
    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "message": "You must be signed in",
        "error": "AuthRequired",
    }


@pytest.mark.asyncio
async def test_session_gate_rejects_unknown_token(client: AsyncClient):
    cookie = f"{get_settings().SESSION_COOKIE_NAME}=forged-token"
    response = await client.get("/myJoinedEvents", headers={"Cookie": cookie})
    assert response.status_code == 401
