"""Drops cache entries made stale by a user mutation."""

import logging

from accounts.infrastructure.cache.cache_protocol import CacheProtocol
from accounts.infrastructure.cache.keys import user_key, users_all_key

logger = logging.getLogger(__name__)


class UserCacheInvalidator:
    """Removes user:<id> and users:all after the store has confirmed a write.

    Invalidation is soft: an unreachable cache is logged and the mutation
    still succeeds. Entries then expire through their TTL.
    """

    def __init__(self, cache: CacheProtocol | None) -> None:
        self._cache = cache

    async def invalidate_user(self, user_id: int) -> bool:
        """Delete both keys in one call. Returns False when the cache was not reached."""
        keys = (user_key(user_id), users_all_key())
        if self._cache is None or not self._cache.is_available():
            logger.warning(
                "Cache unavailable; could not invalidate %s (entries expire by TTL)",
                ", ".join(keys),
            )
            return False
        if not await self._cache.delete(*keys):
            logger.warning("Cache invalidation failed for %s", ", ".join(keys))
            return False
        return True
