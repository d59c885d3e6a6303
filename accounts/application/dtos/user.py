"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from accounts.core.constants import DEFAULT_PAGE_SIZE
from accounts.domain.enums import UserStatus
from accounts.shared.utils.datetime import ensure_utc


@dataclass(frozen=True)
class UserResult:
    """User read-model (result of get_by_id, create_user, etc.). No password."""

    id: int
    username: str
    email: str
    phone: str | None
    nickname: str | None
    avatar: str | None
    status: UserStatus
    created_at: datetime
    updated_at: datetime

    def to_cache(self) -> dict[str, Any]:
        """JSON-safe dict holding every field; inverse of from_cache."""
        data = asdict(self)
        data["status"] = int(self.status)
        data["created_at"] = self.created_at.isoformat()
        data["updated_at"] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_cache(cls, data: dict[str, Any]) -> "UserResult":
        """Rebuild a UserResult from a cache entry written by to_cache.

        Raises:
            KeyError, TypeError, ValueError: Entry is missing fields or malformed.
        """
        return cls(
            id=int(data["id"]),
            username=data["username"],
            email=data["email"],
            phone=data["phone"],
            nickname=data["nickname"],
            avatar=data["avatar"],
            status=UserStatus(data["status"]),
            created_at=ensure_utc(datetime.fromisoformat(data["created_at"])),
            updated_at=ensure_utc(datetime.fromisoformat(data["updated_at"])),
        )


@dataclass(frozen=True)
class UserAuthRecord:
    """Credential view of a user used only by login."""

    id: int
    username: str
    hashed_password: str
    status: UserStatus


@dataclass(frozen=True)
class UserCreate:
    """Validated input for creating a user."""

    username: str
    password: str
    email: str
    phone: str | None = None
    nickname: str | None = None


@dataclass(frozen=True)
class UserUpdate:
    """Partial update; only fields present in `changes` are written."""

    changes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class UserListQuery:
    """Listing filter and 1-based page."""

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    keyword: str | None = None
    status: UserStatus | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def is_default_listing(self) -> bool:
        """True for the unfiltered first page at the default page size."""
        return (
            self.page == 1
            and self.page_size == DEFAULT_PAGE_SIZE
            and not self.keyword
            and self.status is None
        )


@dataclass(frozen=True)
class UserPage:
    """One page of users and the total match count."""

    items: list[UserResult]
    total: int
