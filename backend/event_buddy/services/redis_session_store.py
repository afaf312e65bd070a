"""
Redis-backed session store.

Each session is one key `session:<token>` holding the JSON session payload,
written with SETEX so Redis expires it. Any instance behind the load
balancer can read it.
"""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from event_buddy.core.config import get_settings
from event_buddy.core.exceptions import ServiceUnavailable
from event_buddy.core.logging import get_logger
from event_buddy.core.security import new_session_token
from event_buddy.infrastructure.redis_client import RedisClient, get_redis
from event_buddy.schemas.user import SessionData
from event_buddy.services.interfaces.session_store import SessionStore

logger = get_logger(__name__)

KEY_PREFIX = "session:"


class RedisSessionStore(SessionStore):

    def __init__(self, client: Optional[redis.Redis] = None, ttl_seconds: Optional[int] = None):
        self._client = client
        self.ttl_seconds = ttl_seconds or get_settings().SESSION_TTL_SECONDS

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = get_redis()
        return self._client

    async def create(self, data: SessionData) -> str:
        token = new_session_token()
        try:
            await self.client.setex(KEY_PREFIX + token, self.ttl_seconds, data.model_dump_json(by_alias=True))
        except RedisError as e:
            logger.error("session_store_write_failed", error=str(e))
            raise ServiceUnavailable("Session store unavailable") from e
        return token

    async def get(self, token: str) -> Optional[SessionData]:
        try:
            raw = await self.client.get(KEY_PREFIX + token)
        except RedisError as e:
            logger.error("session_store_read_failed", error=str(e))
            raise ServiceUnavailable("Session store unavailable") from e
        if raw is None:
            return None
        return SessionData.model_validate_json(raw)

    async def delete(self, token: str) -> bool:
        try:
            return bool(await self.client.delete(KEY_PREFIX + token))
        except RedisError as e:
            logger.error("session_store_delete_failed", error=str(e))
            raise ServiceUnavailable("Session store unavailable") from e

    async def close(self) -> None:
        await RedisClient.close()
        self._client = None
