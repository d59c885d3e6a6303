"""SQL user repository. Interface methods return application DTOs.

Each call runs in its own session and commits before returning, so a
caller that invalidates cache entries afterwards always follows a
committed write.
"""

from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from accounts.application.dtos.user import UserAuthRecord, UserCreate, UserResult
from accounts.domain.enums import UserStatus
from accounts.domain.exceptions import (
    DuplicateEmailException,
    ResourceNotFoundException,
    UserAlreadyExistsException,
)
from accounts.infrastructure.persistence.models.user import User
from accounts.shared.utils.datetime import ensure_utc, utc_now

_UPDATABLE_FIELDS = frozenset({"email", "phone", "nickname", "avatar", "status"})


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (no password)."""
    return UserResult(
        id=u.id,
        username=u.username,
        email=u.email,
        phone=u.phone,
        nickname=u.nickname,
        avatar=u.avatar,
        status=UserStatus(u.status),
        created_at=ensure_utc(u.created_at),
        updated_at=ensure_utc(u.updated_at),
    )


def _live():
    return User.deleted_at.is_(None)


class SqlUserRepository:
    """User repository backed by SQLAlchemy (PostgreSQL in production, SQLite in tests)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _get_live(self, session: AsyncSession, user_id: int) -> User | None:
        result = await session.execute(select(User).where(User.id == user_id, _live()))
        return result.scalar_one_or_none()

    async def create_user(self, data: UserCreate, hashed_password: str) -> UserResult:
        """Create user; raise UserAlreadyExistsException naming the conflicting field."""
        async with self._session_factory() as session:
            for column, value, name in (
                (User.username, data.username, "username"),
                (User.email, data.email, "email"),
            ):
                taken = await session.execute(select(User.id).where(column == value))
                if taken.first() is not None:
                    raise UserAlreadyExistsException(name)
            user = User(
                username=data.username,
                hashed_password=hashed_password,
                email=data.email,
                phone=data.phone,
                nickname=data.nickname,
                status=int(UserStatus.ACTIVE),
            )
            session.add(user)
            try:
                await session.commit()
            except IntegrityError:
                # Lost a race with a concurrent insert of the same username/email.
                await session.rollback()
                raise UserAlreadyExistsException()
            return _user_to_result(user)

    async def get_by_id(self, user_id: int) -> UserResult | None:
        async with self._session_factory() as session:
            user = await self._get_live(session, user_id)
            return _user_to_result(user) if user else None

    async def get_by_username(self, username: str) -> UserResult | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(User).where(User.username == username, _live())
            )
            user = result.scalar_one_or_none()
            return _user_to_result(user) if user else None

    async def get_by_email(self, email: str) -> UserResult | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(User).where(User.email == email, _live())
            )
            user = result.scalar_one_or_none()
            return _user_to_result(user) if user else None

    async def get_auth_record(self, username: str) -> UserAuthRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(User).where(User.username == username, _live())
            )
            user = result.scalar_one_or_none()
            if user is None:
                return None
            return UserAuthRecord(
                id=user.id,
                username=user.username,
                hashed_password=user.hashed_password,
                status=UserStatus(user.status),
            )

    async def update_user(self, user_id: int, changes: dict[str, Any]) -> UserResult:
        async with self._session_factory() as session:
            user = await self._get_live(session, user_id)
            if user is None:
                raise ResourceNotFoundException("user", user_id)
            email = changes.get("email")
            if email is not None and email != user.email:
                taken = await session.execute(
                    select(User.id).where(User.email == email, User.id != user_id)
                )
                if taken.first() is not None:
                    raise DuplicateEmailException()
            for name, value in changes.items():
                if name not in _UPDATABLE_FIELDS:
                    continue
                setattr(user, name, int(value) if name == "status" else value)
            user.updated_at = utc_now()
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise DuplicateEmailException()
            return _user_to_result(user)

    async def soft_delete_user(self, user_id: int) -> None:
        async with self._session_factory() as session:
            user = await self._get_live(session, user_id)
            if user is None:
                raise ResourceNotFoundException("user", user_id)
            user.deleted_at = utc_now()
            await session.commit()

    async def list_users(
        self,
        offset: int,
        limit: int,
        keyword: str | None = None,
        status: UserStatus | None = None,
    ) -> tuple[list[UserResult], int]:
        conditions = [_live()]
        if keyword:
            pattern = f"%{keyword}%"
            conditions.append(
                or_(
                    User.username.ilike(pattern),
                    User.nickname.ilike(pattern),
                    User.email.ilike(pattern),
                )
            )
        if status is not None:
            conditions.append(User.status == int(status))
        async with self._session_factory() as session:
            total = await session.scalar(
                select(func.count()).select_from(User).where(*conditions)
            )
            result = await session.execute(
                select(User)
                .where(*conditions)
                .order_by(User.created_at.desc(), User.id.desc())
                .offset(offset)
                .limit(limit)
            )
            return [_user_to_result(u) for u in result.scalars().all()], int(total or 0)
