"""Redis client backing the access-token blacklist."""

import logging
from typing import Optional

import redis.asyncio as redis

from ..config import get_settings

logger = logging.getLogger(__name__)


class RedisClient:
    """Thin async Redis wrapper. Every call degrades to a falsy result when Redis is down."""

    def __init__(self):
        self.settings = get_settings()
        self.redis: Optional[redis.Redis] = None

    @property
    def is_connected(self) -> bool:
        return self.redis is not None

    async def connect(self) -> None:
        """Connect to Redis; raises when the server is unreachable."""
        client = redis.from_url(
            self.settings.redis_url,
            max_connections=self.settings.redis_max_connections,
            decode_responses=True,
        )
        try:
            await client.ping()
        except Exception as e:
            await client.aclose()
            logger.error(f"Failed to connect to Redis: {e}")
            raise
        self.redis = client
        logger.info("Connected to Redis successfully")

    async def disconnect(self) -> None:
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            logger.info("Disconnected from Redis")

    async def ping(self) -> bool:
        if not self.redis:
            return False
        try:
            return bool(await self.redis.ping())
        except Exception as e:
            logger.error(f"Redis PING error: {e}")
            return False

    async def set(self, key: str, value: str, expire: Optional[int] = None) -> bool:
        if not self.redis:
            return False
        try:
            return bool(await self.redis.set(key, value, ex=expire))
        except Exception as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    async def exists(self, key: str) -> bool:
        if not self.redis:
            return False
        try:
            return await self.redis.exists(key) > 0
        except Exception as e:
            logger.error(f"Redis EXISTS error for key {key}: {e}")
            return False

    async def add_to_blacklist(self, token_jti: str, expire: int) -> bool:
        """Blacklist a token id until the token would have expired anyway."""
        return await self.set(f"blacklist:{token_jti}", "1", expire)

    async def is_token_blacklisted(self, token_jti: str) -> bool:
        return await self.exists(f"blacklist:{token_jti}")


_redis_client: Optional[RedisClient] = None


def get_redis_client() -> RedisClient:
    """Get Redis client singleton."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client
