"""Repository interfaces (ports) for the application layer."""

from typing import Any, Protocol

from accounts.application.dtos.user import UserAuthRecord, UserCreate, UserResult
from accounts.domain.enums import UserStatus


class IUserRepository(Protocol):
    """System of record for user accounts. Soft-deleted users are invisible."""

    async def create_user(self, data: UserCreate, hashed_password: str) -> UserResult:
        """Persist a new active user.

        Raises:
            UserAlreadyExistsException: username or email taken.
        """
        ...

    async def get_by_id(self, user_id: int) -> UserResult | None: ...

    async def get_by_username(self, username: str) -> UserResult | None: ...

    async def get_by_email(self, email: str) -> UserResult | None: ...

    async def get_auth_record(self, username: str) -> UserAuthRecord | None: ...

    async def update_user(self, user_id: int, changes: dict[str, Any]) -> UserResult:
        """Apply changes and return the updated user.

        Raises:
            ResourceNotFoundException: No live user with user_id.
            DuplicateEmailException: email belongs to another user.
        """
        ...

    async def soft_delete_user(self, user_id: int) -> None:
        """Mark the user deleted.

        Raises:
            ResourceNotFoundException: No live user with user_id.
        """
        ...

    async def list_users(
        self,
        offset: int,
        limit: int,
        keyword: str | None = None,
        status: UserStatus | None = None,
    ) -> tuple[list[UserResult], int]:
        """Return one page (newest first) and the total match count."""
        ...
