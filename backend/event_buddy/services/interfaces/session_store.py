"""
Session store interface.
Allows swapping where server-side session state lives without touching
the account service or the session gate.
"""

from abc import ABC, abstractmethod
from typing import Optional

from event_buddy.schemas.user import SessionData


class SessionStore(ABC):
    """
    Interface for server-side session storage keyed by an opaque token.

    Implementations:
    - MemorySessionStore: process-local dict, single instance only
    - RedisSessionStore: shared across instances
    """

    @abstractmethod
    async def create(self, data: SessionData) -> str:
        """
        Store session data under a new token.

        Returns:
            The opaque token to put in the session cookie
        """
        pass

    @abstractmethod
    async def get(self, token: str) -> Optional[SessionData]:
        """
        Look up a live session.

        Returns:
            SessionData, or None when the token is unknown or expired
        """
        pass

    @abstractmethod
    async def delete(self, token: str) -> bool:
        """
        Drop a session. Safe to call for unknown tokens.

        Returns:
            True if a session existed
        """
        pass

    async def close(self) -> None:
        """Release backend resources on shutdown."""
        pass
