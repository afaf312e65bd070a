"""
Account endpoints: signup, signin and signout.
Credentials come from the query string (`email`, `pass`) or a body.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response

from event_buddy.api.deps import parse_fields, request_fields, session_token
from event_buddy.core.config import get_settings
from event_buddy.db.gateway import PersistenceGateway, get_gateway
from event_buddy.schemas.user import Credentials, SigninResponse, SignoutResponse, SignupResponse
from event_buddy.services.auth_service import signin, signout, signup
from event_buddy.services.interfaces.session_store import SessionStore
from event_buddy.services.session_factory import get_session_store

router = APIRouter(tags=["Authentication"])


def _set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_SECONDS,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )


@router.api_route("/signup", methods=["GET", "POST"], response_model=SignupResponse)
async def signup_endpoint(
    fields: dict = Depends(request_fields),
    gw: PersistenceGateway = Depends(get_gateway),
):
    """Create an account. Does not sign the user in."""
    await signup(gw, parse_fields(Credentials, fields))
    return SignupResponse(message="Account created")


@router.api_route("/signin", methods=["GET", "POST"], response_model=SigninResponse)
async def signin_endpoint(
    response: Response,
    fields: dict = Depends(request_fields),
    previous_token: Optional[str] = Depends(session_token),
    gw: PersistenceGateway = Depends(get_gateway),
    store: SessionStore = Depends(get_session_store),
):
    """Check credentials and start a cookie session."""
    token, session = await signin(gw, store, parse_fields(Credentials, fields), previous_token)
    _set_session_cookie(response, token)
    return SigninResponse(login=session.is_logged_in, user=session.user)


@router.api_route("/signout", methods=["GET", "POST"], response_model=SignoutResponse)
async def signout_endpoint(
    response: Response,
    token: Optional[str] = Depends(session_token),
    store: SessionStore = Depends(get_session_store),
):
    """End the session. Safe to call without one."""
    was_logged_in = await signout(store, token)
    response.delete_cookie(get_settings().SESSION_COOKIE_NAME)
    return SignoutResponse(was_logged_in=was_logged_in)
