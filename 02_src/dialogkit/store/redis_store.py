"""Redis session store implementation."""

import redis.asyncio as redis

from ..logging_config import get_logger

logger = get_logger(__name__)


class RedisSessionStore:
    """Session store shared between worker processes through Redis."""

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client

    @classmethod
    def from_dsn(cls, dsn: str) -> "RedisSessionStore":
        """Create a store from a redis:// URL."""
        return cls(redis.from_url(dsn))

    async def init(self) -> None:
        """Check the connection."""
        await self.redis.ping()
        logger.info("Connected to Redis session store")

    async def close(self) -> None:
        await self.redis.aclose()

    async def get(self, key: str) -> bytes | None:
        value = await self.redis.get(key)
        if value is None:
            return None
        return value if isinstance(value, bytes) else value.encode("utf-8")

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        await self.redis.set(key, value, ex=ttl)

    async def delete(self, key: str) -> None:
        await self.redis.delete(key)
