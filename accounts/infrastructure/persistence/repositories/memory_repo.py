"""Process-local user repository.

Default store for development and tests. Mutations are serialized with an
asyncio.Lock; uniqueness of username and email covers deleted rows too,
matching the SQL schema.
"""

import asyncio
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from accounts.application.dtos.user import UserAuthRecord, UserCreate, UserResult
from accounts.domain.enums import UserStatus
from accounts.domain.exceptions import (
    DuplicateEmailException,
    ResourceNotFoundException,
    UserAlreadyExistsException,
)
from accounts.shared.utils.datetime import utc_now

_UPDATABLE_FIELDS = frozenset({"email", "phone", "nickname", "avatar", "status"})


@dataclass
class _Row:
    user: UserResult
    hashed_password: str
    deleted_at: datetime | None = None


class InMemoryUserRepository:
    """User repository held in a dict keyed by id."""

    def __init__(self) -> None:
        self._rows: dict[int, _Row] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    def _live(self, user_id: int) -> _Row | None:
        row = self._rows.get(user_id)
        if row is None or row.deleted_at is not None:
            return None
        return row

    def _find_live(self, **match: str) -> _Row | None:
        for row in self._rows.values():
            if row.deleted_at is None and all(
                getattr(row.user, k) == v for k, v in match.items()
            ):
                return row
        return None

    async def create_user(self, data: UserCreate, hashed_password: str) -> UserResult:
        async with self._lock:
            for row in self._rows.values():
                if row.user.username == data.username:
                    raise UserAlreadyExistsException("username")
                if row.user.email == data.email:
                    raise UserAlreadyExistsException("email")
            now = utc_now()
            user = UserResult(
                id=self._next_id,
                username=data.username,
                email=data.email,
                phone=data.phone,
                nickname=data.nickname,
                avatar=None,
                status=UserStatus.ACTIVE,
                created_at=now,
                updated_at=now,
            )
            self._rows[user.id] = _Row(user=user, hashed_password=hashed_password)
            self._next_id += 1
            return user

    async def get_by_id(self, user_id: int) -> UserResult | None:
        row = self._live(user_id)
        return row.user if row else None

    async def get_by_username(self, username: str) -> UserResult | None:
        row = self._find_live(username=username)
        return row.user if row else None

    async def get_by_email(self, email: str) -> UserResult | None:
        row = self._find_live(email=email)
        return row.user if row else None

    async def get_auth_record(self, username: str) -> UserAuthRecord | None:
        row = self._find_live(username=username)
        if row is None:
            return None
        return UserAuthRecord(
            id=row.user.id,
            username=row.user.username,
            hashed_password=row.hashed_password,
            status=row.user.status,
        )

    async def update_user(self, user_id: int, changes: dict[str, Any]) -> UserResult:
        async with self._lock:
            row = self._live(user_id)
            if row is None:
                raise ResourceNotFoundException("user", user_id)
            email = changes.get("email")
            if email is not None and any(
                other.user.email == email and other_id != user_id
                for other_id, other in self._rows.items()
            ):
                raise DuplicateEmailException()
            updates = {k: v for k, v in changes.items() if k in _UPDATABLE_FIELDS}
            if "status" in updates:
                updates["status"] = UserStatus(updates["status"])
            row.user = replace(row.user, **updates, updated_at=utc_now())
            return row.user

    async def soft_delete_user(self, user_id: int) -> None:
        async with self._lock:
            row = self._live(user_id)
            if row is None:
                raise ResourceNotFoundException("user", user_id)
            row.deleted_at = utc_now()

    async def list_users(
        self,
        offset: int,
        limit: int,
        keyword: str | None = None,
        status: UserStatus | None = None,
    ) -> tuple[list[UserResult], int]:
        needle = keyword.casefold() if keyword else None
        matches = []
        for row in self._rows.values():
            if row.deleted_at is not None:
                continue
            user = row.user
            if status is not None and user.status != status:
                continue
            if needle and not any(
                needle in (value or "").casefold()
                for value in (user.username, user.nickname, user.email)
            ):
                continue
            matches.append(user)
        matches.sort(key=lambda u: (u.created_at, u.id), reverse=True)
        return matches[offset : offset + limit], len(matches)
