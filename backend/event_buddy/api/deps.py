"""
Request-level dependencies: merged request fields and the session gate.

Several routes are reachable both as GET with a query string and as POST
with a JSON or form body, so handlers read one merged dict of fields and
validate it into a schema. Body keys win over query keys.
"""

import json
from typing import Optional, Type, TypeVar

import structlog
from fastapi import Depends, Request
from pydantic import BaseModel, ValidationError

from event_buddy.core.config import get_settings
from event_buddy.core.exceptions import AuthRequired, InvalidInput
from event_buddy.schemas.user import SessionData
from event_buddy.services.interfaces.session_store import SessionStore
from event_buddy.services.session_factory import get_session_store

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def request_fields(request: Request) -> dict:
    fields: dict = dict(request.query_params)
    if request.method not in ("POST", "PUT", "PATCH"):
        return fields

    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("application/json"):
        body = await request.body()
        if body.strip():
            try:
                data = json.loads(body)
            except ValueError as e:
                raise InvalidInput("Malformed JSON body") from e
            if not isinstance(data, dict):
                raise InvalidInput("JSON body must be an object")
            fields.update(data)
    elif content_type.startswith(FORM_TYPES):
        form = await request.form()
        fields.update({key: value for key, value in form.items() if isinstance(value, str)})
    return fields


def describe_errors(errors: list[dict]) -> str:
    """First validation error as `field: message`."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def parse_fields(model: Type[ModelT], fields: dict) -> ModelT:
    try:
        return model.model_validate(fields)
    except ValidationError as e:
        raise InvalidInput(describe_errors(e.errors())) from e


def session_token(request: Request) -> Optional[str]:
    return request.cookies.get(get_settings().SESSION_COOKIE_NAME) or None


async def current_session(
    token: Optional[str] = Depends(session_token),
    store: SessionStore = Depends(get_session_store),
) -> Optional[SessionData]:
    if not token:
        return None
    session = await store.get(token)
    if session is None or not session.is_logged_in:
        return None
    structlog.contextvars.bind_contextvars(user=session.user.email)
    return session


async def require_session(session: Optional[SessionData] = Depends(current_session)) -> SessionData:
    """Session gate for protected routes."""
    if session is None:
        raise AuthRequired()
    return session
