"""User application service: account lifecycle, read-through cache and login."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from accounts.application.dtos.user import (
    UserCreate,
    UserListQuery,
    UserPage,
    UserResult,
    UserUpdate,
)
from accounts.application.interfaces.repositories import IUserRepository
from accounts.application.services.cache_invalidator import UserCacheInvalidator
from accounts.core.config import Settings
from accounts.domain.enums import UserStatus
from accounts.domain.exceptions import (
    InvalidCredentialsException,
    ResourceNotFoundException,
    UserDisabledException,
    ValidationException,
)
from accounts.infrastructure.cache.cache_protocol import CacheProtocol
from accounts.infrastructure.cache.keys import token_key, user_key, users_all_key
from accounts.infrastructure.security.jwt import CredentialIssuer, IssuedToken
from accounts.infrastructure.security.password import (
    DUMMY_PASSWORD_HASH,
    get_password_hash,
    verify_password,
)
from accounts.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    """Issued credential plus the user it was issued for."""

    token: str
    expires_in: int
    user: UserResult


class UserService:
    """Create, read, update, delete and authenticate users.

    Every mutation is acknowledged only after the store committed it and
    the stale cache entries were dropped.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        cache: CacheProtocol | None,
        issuer: CredentialIssuer,
        settings: Settings,
    ) -> None:
        self._user_repo = user_repo
        self._cache = cache
        self._issuer = issuer
        self._settings = settings
        self._invalidator = UserCacheInvalidator(cache)

    def _cache_usable(self) -> bool:
        return self._cache is not None and self._cache.is_available()

    @traced("user_service.create_user")
    async def create_user(self, data: UserCreate) -> UserResult:
        hashed = await asyncio.to_thread(get_password_hash, data.password)
        user = await self._user_repo.create_user(data, hashed)
        await self._invalidator.invalidate_user(user.id)
        logger.info("User created: id=%s username=%s", user.id, user.username)
        return user

    @traced("user_service.get_user")
    async def get_user(self, user_id: int) -> UserResult:
        """Return the user, reading through user:<id>.

        Raises:
            ResourceNotFoundException: No live user with user_id.
        """
        key = user_key(user_id)
        if self._cache_usable():
            cached = await self._cache.get(key)
            if cached is not None:
                try:
                    return UserResult.from_cache(cached)
                except (KeyError, TypeError, ValueError):
                    logger.warning("Discarding malformed cache entry %s", key)
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        if self._cache_usable():
            await self._cache.set(key, user.to_cache(), ttl=self._settings.cache_ttl_user)
        return user

    @traced("user_service.list_users")
    async def list_users(self, query: UserListQuery) -> UserPage:
        """Return one page of users; the default listing is cached under users:all."""
        use_cache = query.is_default_listing and self._cache_usable()
        if use_cache:
            cached = await self._cache.get(users_all_key())
            if cached is not None:
                try:
                    return UserPage(
                        items=[UserResult.from_cache(item) for item in cached["items"]],
                        total=int(cached["total"]),
                    )
                except (KeyError, TypeError, ValueError):
                    logger.warning("Discarding malformed cache entry %s", users_all_key())
        items, total = await self._user_repo.list_users(
            query.offset, query.page_size, keyword=query.keyword, status=query.status
        )
        if use_cache:
            await self._cache.set(
                users_all_key(),
                {"items": [u.to_cache() for u in items], "total": total},
                ttl=self._settings.cache_ttl_user,
            )
        return UserPage(items=items, total=total)

    @traced("user_service.update_user")
    async def update_user(self, user_id: int, data: UserUpdate) -> UserResult:
        """Apply a partial update.

        Raises:
            ValidationException: No fields to update.
            ResourceNotFoundException: No live user with user_id.
            DuplicateEmailException: email belongs to another user.
        """
        if not data.changes:
            raise ValidationException("At least one field is required")
        user = await self._user_repo.update_user(user_id, data.changes)
        await self._invalidator.invalidate_user(user_id)
        logger.info("User updated: id=%s fields=%s", user_id, sorted(data.changes))
        return user

    @traced("user_service.delete_user")
    async def delete_user(self, user_id: int) -> None:
        await self._user_repo.soft_delete_user(user_id)
        await self._invalidator.invalidate_user(user_id)
        logger.info("User deleted: id=%s", user_id)

    @traced("user_service.login")
    async def login(self, username: str, password: str) -> LoginResult:
        """Verify credentials and issue a token.

        Unknown users are checked against a dummy hash so both failure paths
        cost one bcrypt comparison.

        Raises:
            InvalidCredentialsException: Unknown username or wrong password.
            UserDisabledException: Correct password but the account is disabled.
        """
        record = await self._user_repo.get_auth_record(username)
        if record is None:
            await asyncio.to_thread(verify_password, password, DUMMY_PASSWORD_HASH)
            logger.info("Login failed: unknown username")
            raise InvalidCredentialsException()
        if not await asyncio.to_thread(verify_password, password, record.hashed_password):
            logger.info("Login failed: wrong password for user_id=%s", record.id)
            raise InvalidCredentialsException()
        if record.status != UserStatus.ACTIVE:
            logger.info("Login refused: user_id=%s is disabled", record.id)
            raise UserDisabledException()

        issued = self._issuer.issue(record.id, record.username)
        if self._cache_usable():
            ttl = min(self._settings.cache_ttl_session, issued.expires_in)
            await self._cache.set(token_key(issued.token), record.id, ttl=ttl)
        user = await self.get_user(record.id)
        logger.info("Login succeeded: user_id=%s", record.id)
        return LoginResult(token=issued.token, expires_in=issued.expires_in, user=user)

    @traced("user_service.refresh_token")
    async def refresh_token(self, token: str) -> IssuedToken:
        """Exchange a token that is inside its refresh window for a new one."""
        issued = self._issuer.refresh(token)
        if self._cache_usable():
            claims = self._issuer.validate(issued.token)
            ttl = min(self._settings.cache_ttl_session, issued.expires_in)
            await self._cache.set(token_key(issued.token), claims.subject_id, ttl=ttl)
        return issued
