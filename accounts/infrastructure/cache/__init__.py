"""Cache layer: Redis-backed CacheService, protocol and key builders."""

from accounts.infrastructure.cache.cache_protocol import CacheProtocol
from accounts.infrastructure.cache.keys import token_key, user_key, users_all_key
from accounts.infrastructure.cache.redis_cache import CacheService

__all__ = ["CacheProtocol", "CacheService", "token_key", "user_key", "users_all_key"]
