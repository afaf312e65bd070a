"""
In-process session store.

Sessions live in a dict for the lifetime of the process. Fine for a single
instance and for tests; a multi-instance deployment needs the Redis store.
"""

import time
from typing import Optional

from event_buddy.core.config import get_settings
from event_buddy.core.metrics import active_sessions
from event_buddy.core.security import new_session_token
from event_buddy.schemas.user import SessionData
from event_buddy.services.interfaces.session_store import SessionStore


class MemorySessionStore(SessionStore):

    def __init__(self, ttl_seconds: Optional[int] = None):
        self.ttl_seconds = ttl_seconds or get_settings().SESSION_TTL_SECONDS
        self._sessions: dict[str, tuple[float, dict]] = {}

    def _purge_expired(self) -> None:
        now = time.monotonic()
        expired = [token for token, (expires_at, _) in self._sessions.items() if expires_at <= now]
        for token in expired:
            del self._sessions[token]
        active_sessions.set(len(self._sessions))

    async def create(self, data: SessionData) -> str:
        self._purge_expired()
        token = new_session_token()
        self._sessions[token] = (time.monotonic() + self.ttl_seconds, data.model_dump(by_alias=True))
        active_sessions.set(len(self._sessions))
        return token

    async def get(self, token: str) -> Optional[SessionData]:
        entry = self._sessions.get(token)
        if entry is None:
            return None
        expires_at, payload = entry
        if expires_at <= time.monotonic():
            await self.delete(token)
            return None
        return SessionData.model_validate(payload)

    async def delete(self, token: str) -> bool:
        existed = self._sessions.pop(token, None) is not None
        active_sessions.set(len(self._sessions))
        return existed

    async def close(self) -> None:
        self._sessions.clear()
        active_sessions.set(0)
