"""Application services."""

from accounts.application.services.cache_invalidator import UserCacheInvalidator
from accounts.application.services.user_service import LoginResult, UserService

__all__ = ["LoginResult", "UserCacheInvalidator", "UserService"]
