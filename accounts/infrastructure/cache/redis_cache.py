"""Redis-based cache service.

Provides async Redis caching with TTL support for user records, the
aggregate user listing and issued session tokens. Key format lives in
accounts.infrastructure.cache.keys.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as redis

from accounts.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheService:
    """Async Redis cache service with TTL support.

    Call connect() at startup and disconnect() at shutdown. Every operation
    is soft: Redis errors are logged and reported through the return value,
    never raised to the caller. When the service created its own client, a
    connection error triggers one reconnect attempt before giving up.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        redis_client: redis.Redis | None = None,
    ) -> None:
        """Initialize cache service.

        Args:
            settings: Connection settings; defaults to get_settings().
            redis_client: Optional Redis client for testing or DI. An injected
                client is treated as connected and is never replaced.
        """
        self.settings = settings or get_settings()
        self.redis = redis_client
        self._owns_client = redis_client is None
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. A failed ping leaves the cache disabled."""
        if self.redis is not None:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=(
                    self.settings.redis_password.get_secret_value()
                    if self.settings.redis_password
                    else None
                ),
                max_connections=self.settings.redis_max_connections,
                decode_responses=True,
                socket_connect_timeout=self.settings.redis_socket_timeout,
                socket_timeout=self.settings.redis_socket_timeout,
                socket_keepalive=True,
            )
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Redis cache connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Cache disabled.", e)
            self._connected = False
            self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis is not None:
            if self._owns_client:
                await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    async def _reconnect(self) -> bool:
        """Attempt to reconnect after a connection error. Returns True if reconnected."""
        if not self._owns_client or self.redis is None:
            return False
        try:
            await self.redis.aclose()
        except redis.RedisError as e:
            logger.debug("Ignoring error while closing stale Redis client: %s", e)
        self.redis = None
        self._connected = False
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def _run(
        self,
        op: str,
        key: str,
        call: Callable[[redis.Redis], Awaitable[T]],
        default: T,
    ) -> T:
        """Run one Redis call with a single reconnect on connection errors."""
        if not self.is_available() or self.redis is None:
            return default
        try:
            return await call(self.redis)
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect() and self.redis is not None:
                try:
                    return await call(self.redis)
                except redis.RedisError:
                    logger.exception("Cache %s error for %s after reconnect", op, key)
                    return default
            logger.warning("Cache %s unavailable for %s (Redis disconnected)", op, key)
            return default
        except redis.RedisError:
            logger.exception("Cache %s error for %s", op, key)
            return default

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing/unavailable."""
        raw = await self._run("get", key, lambda r: r.get(key), None)
        if raw is None:
            logger.debug("Cache MISS: %s", key)
            return None
        try:
            value = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Cache entry %s is not valid JSON; ignoring", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return value

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL in seconds. Returns True on success."""
        serialized = json.dumps(value)

        async def _setex(r: redis.Redis) -> bool:
            await r.setex(key, ttl, serialized)
            return True

        stored = await self._run("set", key, _setex, False)
        if stored:
            logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return stored

    async def delete(self, *keys: str) -> bool:
        """Remove keys with a single DEL. Returns True if the command ran."""
        if not keys:
            return True
        label = ",".join(keys)

        async def _del(r: redis.Redis) -> bool:
            await r.delete(*keys)
            return True

        deleted = await self._run("delete", label, _del, False)
        if deleted:
            logger.debug("Cache DELETE: %s", label)
        return deleted
