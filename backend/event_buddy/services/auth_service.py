"""
Account service: signup, signin and signout.
Owns password hashing and the session lifecycle.
"""

from typing import Optional

from event_buddy.core.exceptions import Conflict, DuplicateAccount, InvalidCredentials, NotFound
from event_buddy.core.logging import get_logger
from event_buddy.core.metrics import record_auth_attempt
from event_buddy.core.security import hash_password, verify_password
from event_buddy.db.gateway import PersistenceGateway
from event_buddy.models.user import User
from event_buddy.schemas.user import Credentials, SessionData, SessionUser
from event_buddy.services.interfaces.session_store import SessionStore

logger = get_logger(__name__)


async def signup(gw: PersistenceGateway, credentials: Credentials) -> User:
    """
    Create an account. No session is started.
    Raises DuplicateAccount if the email is taken.
    """
    if await gw.users.find_one(email=credentials.email):
        record_auth_attempt("signup", success=False)
        logger.warning("registration_failed", reason="email_exists", email=credentials.email)
        raise DuplicateAccount()

    try:
        user = await gw.users.insert(
            email=credentials.email,
            hashed_password=hash_password(credentials.password),
            cart_id=0,
        )
    except Conflict as e:
        # Lost a race with a concurrent signup for the same email
        record_auth_attempt("signup", success=False)
        raise DuplicateAccount() from e

    record_auth_attempt("signup", success=True)
    logger.info("user_registered", user_id=user.id, email=user.email)
    return user


async def signin(
    gw: PersistenceGateway,
    store: SessionStore,
    credentials: Credentials,
    previous_token: Optional[str] = None,
) -> tuple[str, SessionData]:
    """
    Check credentials and start a session.
    Unknown email and wrong password raise the same InvalidCredentials.
    Returns the new session token and the stored session data.
    """
    user = await gw.users.find_one(email=credentials.email)

    if not user or not verify_password(credentials.password, user.hashed_password):
        record_auth_attempt("signin", success=False)
        logger.warning("login_failed", email=credentials.email)
        raise InvalidCredentials()

    if previous_token:
        await store.delete(previous_token)

    session = SessionData(
        is_logged_in=True,
        user=SessionUser(email=user.email, cart_id=user.cart_id or 0),
    )
    token = await store.create(session)

    record_auth_attempt("signin", success=True)
    logger.info("user_logged_in", user_id=user.id)
    return token, session


async def signout(store: SessionStore, token: Optional[str]) -> bool:
    """Idempotent. Returns whether a session was active."""
    was_logged_in = bool(token) and await store.delete(token)
    record_auth_attempt("signout", success=was_logged_in)
    logger.info("user_logged_out", was_logged_in=was_logged_in)
    return was_logged_in


async def get_session_user(gw: PersistenceGateway, session: SessionData) -> User:
    """Resolve the account behind a session. The account must still exist."""
    user = await gw.users.find_one(email=session.user.email)
    if not user:
        logger.warning("session_user_missing", email=session.user.email)
        raise NotFound("User not found")
    return user
