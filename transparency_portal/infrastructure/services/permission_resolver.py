"""Resolves user permissions from DB (implements IPermissionResolver)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from transparency_portal.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from transparency_portal.infrastructure.persistence.models.role import Role


class PermissionResolver:
    """Flattens user -> active roles -> permissions into a set of codes."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_user_permissions(self, user_id: int) -> set[str]:
        query = (
            select(Permission.code)
            .select_from(UserRole)
            .join(Role, Role.id == UserRole.role_id)
            .join(RolePermission, RolePermission.role_id == UserRole.role_id)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .where(UserRole.user_id == user_id, Role.is_active.is_(True))
            .distinct()
        )
        result = await self.db.execute(query)
        return set(result.scalars().all())

    async def get_user_roles(self, user_id: int) -> list[str]:
        """Codes of the user's active roles, sorted."""
        result = await self.db.execute(
            select(Role.code)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id, Role.is_active.is_(True))
            .order_by(Role.code)
        )
        return list(result.scalars().all())
