"""Cache protocol for the application layer (DIP)."""

from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Protocol for cache backends (e.g. Redis). Failures are soft: methods never raise."""

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""
        ...

    async def get(self, key: str) -> Any | None:
        """Return cached value or None."""
        ...

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL in seconds; False when not stored."""
        ...

    async def delete(self, *keys: str) -> bool:
        """Remove keys in one call; False when the cache could not be reached."""
        ...
