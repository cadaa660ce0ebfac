"""Redis client holding the invite token denylist."""

import logging
from typing import Optional

import redis.asyncio as redis

from ..config import get_settings

logger = logging.getLogger("notus.redis")

DENYLIST_PREFIX = "invite-denylist:"


class RedisClient:
    """Thin async wrapper. Writes degrade to False when Redis is away, denylist reads report failures."""

    def __init__(self, url: Optional[str] = None, max_connections: Optional[int] = None):
        settings = get_settings()
        self.url = url or settings.redis_url
        self.max_connections = max_connections or settings.redis_max_connections
        self.redis: Optional[redis.Redis] = None

    @property
    def connected(self) -> bool:
        return self.redis is not None

    async def connect(self) -> None:
        """Connect to Redis."""
        try:
            self.redis = redis.from_url(
                self.url, max_connections=self.max_connections, decode_responses=True
            )
            await self.redis.ping()
            logger.info("Connected to Redis successfully")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self.redis = None
            raise

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
        """Set value with optional expiration in seconds."""
        if not self.redis:
            return False
        try:
            if expire:
                return bool(await self.redis.setex(key, expire, value))
            return bool(await self.redis.set(key, value))
        except Exception as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    async def add_to_denylist(self, jti: str, expire: int) -> bool:
        """Deny an invite until it would have expired anyway."""
        if expire <= 0:
            # already expired, signature check rejects it
            return True
        return await self.set(f"{DENYLIST_PREFIX}{jti}", "revoked", expire)

    async def is_denylisted(self, jti: str) -> Optional[bool]:
        """True or False, or None when the lookup itself failed."""
        if not self.redis:
            # no denylist configured, nothing can have been revoked
            return False
        key = f"{DENYLIST_PREFIX}{jti}"
        try:
            return await self.redis.exists(key) > 0
        except Exception as e:
            logger.error(f"Redis EXISTS error for key {key}: {e}")
            return None


_redis_client: Optional[RedisClient] = None


def get_redis_client() -> RedisClient:
    """Process-wide client, connected during app startup."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client
