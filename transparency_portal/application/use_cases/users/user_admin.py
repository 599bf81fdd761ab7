"""User administration: accounts, role assignment, deactivation and password resets.

Users are never hard-deleted; deactivated accounts can be restored.
Any change to a user's roles or active flag drops that user's cached
permission set.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import partial
from typing import Any

from transparency_portal.application.dtos.user import (
    RoleResult,
    UserResult,
    UserWithRoles,
)
from transparency_portal.application.interfaces.repositories import (
    IRoleRepository,
    IUserRepository,
)
from transparency_portal.application.interfaces.services import DeferCallback
from transparency_portal.application.services.authorization_service import (
    AuthorizationService,
)
from transparency_portal.core.constants import MIN_PASSWORD_LENGTH
from transparency_portal.domain.exceptions import (
    DuplicateUserException,
    ResourceNotFoundException,
    ValidationException,
)
from transparency_portal.shared.utils.sanitization import sanitize_text

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset({"email", "full_name", "is_active", "role_ids"})


def _normalize_email(email: str) -> str:
    cleaned = (email or "").strip().lower()
    if not cleaned:
        raise ValidationException("Email is required", field="email")
    return cleaned


def _check_password(password: str) -> None:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationException(
            f"Password must have at least {MIN_PASSWORD_LENGTH} characters",
            field="password",
        )


class UserAdminService:
    """Administrative operations on users. Callers run writes inside a transaction."""

    def __init__(
        self,
        user_repo: IUserRepository,
        role_repo: IRoleRepository,
        authorization: AuthorizationService | None = None,
        defer_until_commit: DeferCallback | None = None,
    ) -> None:
        self.user_repo = user_repo
        self.role_repo = role_repo
        self.authorization = authorization
        self.defer_until_commit = defer_until_commit

    async def _with_roles(self, user: UserResult) -> UserWithRoles:
        roles = await self.role_repo.get_roles_for_users([user.id])
        return UserWithRoles(user=user, roles=tuple(roles.get(user.id, ())))

    async def _require_user(self, user_id: int) -> UserResult:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def _require_roles(self, role_ids: Iterable[int]) -> set[int]:
        """All ids must name active roles."""
        wanted = set(role_ids)
        found = {r.id for r in await self.role_repo.get_roles(wanted) if r.is_active}
        missing = sorted(wanted - found)
        if missing:
            raise ResourceNotFoundException("role", missing[0])
        return wanted

    async def _ensure_email_free(self, email: str, user_id: int | None = None) -> None:
        existing = await self.user_repo.get_by_email(email)
        if existing is not None and existing.id != user_id:
            raise DuplicateUserException("email", email)

    async def _forget_permissions(self, user_id: int) -> None:
        if self.authorization is None:
            return
        await self.authorization.invalidate_user_cache(user_id)
        if self.defer_until_commit is not None:
            self.defer_until_commit(
                partial(self.authorization.invalidate_user_cache, user_id)
            )

    async def create(
        self,
        *,
        username: str,
        email: str,
        password: str,
        full_name: str | None = None,
        role_ids: Iterable[int] = (),
        is_active: bool = True,
    ) -> UserWithRoles:
        """Create an account and assign its roles.

        Raises:
            ValidationException: blank username or email, or a short password.
            DuplicateUserException: username or email already in use.
            ResourceNotFoundException: a role id is unknown or inactive.
        """
        clean_username = (username or "").strip()
        if not clean_username:
            raise ValidationException("Username is required", field="username")
        clean_email = _normalize_email(email)
        _check_password(password)
        if await self.user_repo.get_by_username(clean_username) is not None:
            raise DuplicateUserException("username", clean_username)
        await self._ensure_email_free(clean_email)
        roles = await self._require_roles(role_ids)

        user = await self.user_repo.create_user(
            username=clean_username,
            email=clean_email,
            password=password,
            full_name=sanitize_text(full_name),
            is_active=is_active,
        )
        if roles:
            await self.role_repo.set_user_roles(user.id, roles)
        logger.info("Created user %s with roles %s", user.id, sorted(roles))
        return await self._with_roles(user)

    async def get(self, user_id: int) -> UserWithRoles:
        """Any user, active or not."""
        return await self._with_roles(await self._require_user(user_id))

    async def list_users(
        self,
        *,
        term: str | None = None,
        is_active: bool | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> tuple[list[UserWithRoles], int]:
        """One page of users (newest first) and the total matching the filters."""
        cleaned = (term or "").strip() or None
        users = await self.user_repo.list_users(
            term=cleaned, is_active=is_active, skip=skip, limit=limit
        )
        total = await self.user_repo.count_users(term=cleaned, is_active=is_active)
        roles = await self.role_repo.get_roles_for_users(u.id for u in users)
        return [UserWithRoles(u, tuple(roles.get(u.id, ()))) for u in users], total

    async def count(self, is_active: bool | None = None) -> int:
        return await self.user_repo.count_users(is_active=is_active)

    async def update(self, user_id: int, changes: dict[str, Any]) -> UserWithRoles:
        """Partial update of email, full name, active flag and role set.

        role_ids replaces the user's roles entirely; an empty list removes them all.
        """
        current = await self._require_user(user_id)
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationException(f"Unknown user fields: {', '.join(sorted(unknown))}")
        for name in ("email", "is_active", "role_ids"):
            if name in changes and changes[name] is None:
                raise ValidationException(f"User {name} cannot be null", field=name)

        fields: dict[str, Any] = {}
        if "email" in changes:
            fields["email"] = _normalize_email(changes["email"])
            await self._ensure_email_free(fields["email"], user_id)
        if "full_name" in changes:
            fields["full_name"] = sanitize_text(changes["full_name"])
        if "is_active" in changes:
            fields["is_active"] = changes["is_active"]
        roles = (
            await self._require_roles(changes["role_ids"]) if "role_ids" in changes else None
        )

        user = await self.user_repo.update_user(user_id, **fields) if fields else current
        if roles is not None:
            await self.role_repo.set_user_roles(user_id, roles)
        if roles is not None or fields.get("is_active", current.is_active) != current.is_active:
            await self._forget_permissions(user_id)
        return await self._with_roles(user)

    async def deactivate(self, user_id: int) -> UserWithRoles:
        """Soft delete. An already inactive user is reported as not found."""
        current = await self._require_user(user_id)
        if not current.is_active:
            raise ResourceNotFoundException("user", user_id)
        user = await self.user_repo.update_user(user_id, is_active=False)
        await self._forget_permissions(user_id)
        logger.info("Deactivated user %s", user_id)
        return await self._with_roles(user)

    async def restore(self, user_id: int) -> UserWithRoles:
        current = await self._require_user(user_id)
        user = current
        if not current.is_active:
            user = await self.user_repo.update_user(user_id, is_active=True)
            await self._forget_permissions(user_id)
            logger.info("Restored user %s", user_id)
        return await self._with_roles(user)

    async def reset_password(self, user_id: int, password: str) -> None:
        """Set a new password chosen by the administrator."""
        await self._require_user(user_id)
        _check_password(password)
        await self.user_repo.set_password(user_id, password)
        logger.info("Password reset for user %s", user_id)

    async def list_roles(self, is_active: bool | None = None) -> list[RoleResult]:
        return await self.role_repo.list_roles(is_active=is_active)

    async def users_with_role(self, role_id: int) -> list[UserResult]:
        if await self.role_repo.get_role(role_id) is None:
            raise ResourceNotFoundException("role", role_id)
        return await self.user_repo.list_by_role(role_id)
