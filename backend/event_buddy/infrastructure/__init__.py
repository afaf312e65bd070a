"""
Connections to services outside the process.
Currently the Redis client behind the shared session store.
"""

from .redis_client import RedisClient, get_redis

__all__ = ["RedisClient", "get_redis"]
