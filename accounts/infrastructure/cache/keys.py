"""Cache key builders. Single place for key format (DRY).

Key components must not contain CACHE_KEY_SEP to avoid ambiguous or
colliding keys.
"""

from accounts.core.constants import (
    CACHE_KEY_SEP,
    CACHE_KEY_USERS_ALL,
    CACHE_PREFIX_TOKEN,
    CACHE_PREFIX_USER,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator."""
    if not value or CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must be non-empty and must not contain {CACHE_KEY_SEP!r}"
        )


def user_key(user_id: int) -> str:
    """Cache key for a user record: user:<id>."""
    return f"{CACHE_PREFIX_USER}{CACHE_KEY_SEP}{int(user_id)}"


def users_all_key() -> str:
    """Cache key for the aggregate user listing."""
    return CACHE_KEY_USERS_ALL


def token_key(token: str) -> str:
    """Cache key for an issued session token: token:<token>."""
    _validate_key_component(token, "token")
    return f"{CACHE_PREFIX_TOKEN}{CACHE_KEY_SEP}{token}"
