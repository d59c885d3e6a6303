"""Application DTOs."""

from accounts.application.dtos.user import (
    UserAuthRecord,
    UserCreate,
    UserListQuery,
    UserPage,
    UserResult,
    UserUpdate,
)

__all__ = [
    "UserAuthRecord",
    "UserCreate",
    "UserListQuery",
    "UserPage",
    "UserResult",
    "UserUpdate",
]
