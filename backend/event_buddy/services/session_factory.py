"""
Session store factory.
Configures which session backend to use.
"""

from typing import Optional

from event_buddy.core.config import get_settings
from event_buddy.services.interfaces.session_store import SessionStore
from event_buddy.services.memory_session_store import MemorySessionStore
from event_buddy.services.redis_session_store import RedisSessionStore


def build_session_store() -> SessionStore:
    """
    Build the configured session store.

    - memory: single process, development and tests
    - redis: anything running more than one instance

    Selected via SESSION_BACKEND env var.
    """
    backend = get_settings().SESSION_BACKEND.lower()

    if backend == 'redis':
        return RedisSessionStore()
    if backend == 'memory':
        return MemorySessionStore()
    raise ValueError(f"Unknown SESSION_BACKEND: {backend!r}")


# Singleton instance
_store: Optional[SessionStore] = None

def get_session_store() -> SessionStore:
    """Get session store singleton."""
    global _store
    if _store is None:
        _store = build_session_store()
    return _store


async def close_session_store() -> None:
    global _store
    if _store is not None:
        await _store.close()
        _store = None
