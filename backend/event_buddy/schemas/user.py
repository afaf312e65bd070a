"""
Pydantic schemas for account and session payloads.
"""

from pydantic import AliasChoices, EmailStr, Field

from event_buddy.schemas.common import CamelModel, Envelope, MessageResponse


class Credentials(CamelModel):
    email: EmailStr
    # The mobile client sends `pass`; JSON callers may send `password`
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        validation_alias=AliasChoices("pass", "password"),
    )


class SessionUser(CamelModel):
    email: str
    cart_id: int = 0


class SessionData(CamelModel):
    is_logged_in: bool = True
    user: SessionUser


class SignupResponse(MessageResponse):
    pass


class SigninResponse(Envelope):
    login: bool
    user: SessionUser


class SignoutResponse(Envelope):
    was_logged_in: bool
