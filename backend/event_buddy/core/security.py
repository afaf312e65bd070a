"""
Password hashing with bcrypt and a server-side pepper.

The pepper is appended to the password before hashing. The combined value is
reduced with SHA-256 first so that long passwords and long peppers never hit
bcrypt's 72-byte input limit.
"""

import base64
import hashlib
import secrets

import bcrypt

from event_buddy.core.config import get_settings


def _peppered(password: str) -> bytes:
    pepper = get_settings().PASSWORD_PEPPER
    digest = hashlib.sha256(f"{password}{pepper}".encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str) -> str:
    """Hash a password with a per-record salt and the configured cost."""
    salt = bcrypt.gensalt(rounds=get_settings().BCRYPT_ROUNDS)
    return bcrypt.hashpw(_peppered(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(_peppered(plain_password), hashed_password.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def new_session_token() -> str:
    return secrets.token_urlsafe(32)
