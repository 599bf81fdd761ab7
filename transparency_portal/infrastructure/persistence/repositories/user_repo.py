"""User repository with password helpers. Interface methods return application DTOs."""

from __future__ import annotations

import asyncio

from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from transparency_portal.application.dtos.user import UserResult
from transparency_portal.infrastructure.persistence.models.permission import UserRole
from transparency_portal.infrastructure.persistence.models.user import User
from transparency_portal.infrastructure.persistence.repositories.base import (
    BaseRepository,
)
from transparency_portal.infrastructure.security.password import (
    get_password_hash,
    verify_password,
)

# Lazy dummy hash for constant-time comparison when user is not found.
_dummy_hash_cache: str | None = None


async def _get_dummy_hash() -> str:
    """Return a valid bcrypt hash for dummy comparison; computed once in thread pool."""
    global _dummy_hash_cache
    if _dummy_hash_cache is None:
        _dummy_hash_cache = await asyncio.to_thread(
            get_password_hash, "not-a-real-password"
        )
    return _dummy_hash_cache


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (no password)."""
    return UserResult(
        id=u.id,
        username=u.username,
        email=u.email,
        full_name=u.full_name,
        is_active=u.is_active,
    )


class UserRepository(BaseRepository[User]):
    """User repository: authentication, lookups and administration writes."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def _get_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: int) -> UserResult | None:
        user = await self._get_row(user_id)
        return _user_to_result(user) if user else None

    async def get_by_username(self, username: str) -> UserResult | None:
        user = await self._get_by_username(username)
        return _user_to_result(user) if user else None

    async def authenticate(self, username: str, password: str) -> UserResult | None:
        """Return the user when active and the password matches.

        bcrypt runs in a worker thread so the event loop is not blocked.
        """
        user = await self._get_by_username(username)
        if not user:
            dummy_hash = await _get_dummy_hash()
            await asyncio.to_thread(verify_password, password, dummy_hash)
            return None
        if not user.is_active:
            return None
        if not await asyncio.to_thread(verify_password, password, user.hashed_password):
            return None
        return _user_to_result(user)

    async def create_user(
        self,
        username: str,
        email: str,
        password: str,
        full_name: str | None = None,
        is_active: bool = True,
    ) -> UserResult:
        hashed = await asyncio.to_thread(get_password_hash, password)
        user = await self.create(
            User(
                username=username,
                email=email,
                full_name=full_name,
                hashed_password=hashed,
                is_active=is_active,
            )
        )
        return _user_to_result(user)

    async def update_user(self, user_id: int, **fields: Any) -> UserResult:
        row = await self._require_row(user_id)
        return _user_to_result(await self.update(row, **fields))

    async def set_password(self, user_id: int, password: str) -> None:
        row = await self._require_row(user_id)
        hashed = await asyncio.to_thread(get_password_hash, password)
        await self.update(row, hashed_password=hashed)

    async def get_by_email(self, email: str) -> UserResult | None:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        user = result.scalar_one_or_none()
        return _user_to_result(user) if user else None

    @staticmethod
    def _filtered(query: Any, term: str | None, is_active: bool | None) -> Any:
        if term:
            needle = term.lower()
            query = query.where(
                or_(
                    func.lower(User.username).contains(needle, autoescape=True),
                    func.lower(User.email).contains(needle, autoescape=True),
                    func.lower(User.full_name).contains(needle, autoescape=True),
                )
            )
        if is_active is not None:
            query = query.where(User.is_active.is_(is_active))
        return query

    async def list_users(
        self,
        *,
        term: str | None = None,
        is_active: bool | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[UserResult]:
        """Newest first. term matches username, email or full name, case-insensitively."""
        query = self._filtered(select(User), term, is_active)
        result = await self.db.execute(
            query.order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(limit)
        )
        return [_user_to_result(u) for u in result.scalars().all()]

    async def count_users(
        self, *, term: str | None = None, is_active: bool | None = None
    ) -> int:
        query = self._filtered(select(func.count(User.id)), term, is_active)
        return int((await self.db.execute(query)).scalar_one())

    async def list_by_role(self, role_id: int) -> list[UserResult]:
        result = await self.db.execute(
            select(User)
            .join(UserRole, UserRole.user_id == User.id)
            .where(UserRole.role_id == role_id)
            .order_by(User.username)
        )
        return [_user_to_result(u) for u in result.scalars().all()]
