"""Role and permission persistence: idempotent ensure_* helpers for seeding,
role lookups and user role assignment for administration.
"""

from collections import defaultdict
from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from transparency_portal.application.dtos.user import RoleResult
from transparency_portal.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from transparency_portal.infrastructure.persistence.models.role import Role


def _role_to_result(r: Role) -> RoleResult:
    return RoleResult(
        id=r.id,
        code=r.code,
        name=r.name,
        description=r.description,
        is_active=r.is_active,
    )


class RbacRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def ensure_permission(self, code: str, description: str | None = None) -> int:
        """Return the id of permission code, creating it when missing."""
        result = await self.db.execute(select(Permission).where(Permission.code == code))
        existing = result.scalar_one_or_none()
        if existing:
            return existing.id
        resource, _, action = code.partition(":")
        permission = Permission(
            code=code, resource=resource, action=action, description=description
        )
        self.db.add(permission)
        await self.db.flush()
        return permission.id

    async def ensure_role(self, code: str, name: str, description: str | None = None) -> int:
        result = await self.db.execute(select(Role).where(Role.code == code))
        existing = result.scalar_one_or_none()
        if existing:
            return existing.id
        role = Role(code=code, name=name, description=description)
        self.db.add(role)
        await self.db.flush()
        return role.id

    async def grant(self, role_id: int, permission_id: int) -> bool:
        """Attach a permission to a role. Returns False when already attached."""
        result = await self.db.execute(
            select(RolePermission.id).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
        )
        if result.scalar_one_or_none() is not None:
            return False
        self.db.add(RolePermission(role_id=role_id, permission_id=permission_id))
        await self.db.flush()
        return True

    async def assign_role(self, user_id: int, role_id: int) -> bool:
        """Give a user a role. Returns False when already assigned."""
        result = await self.db.execute(
            select(UserRole.id).where(
                UserRole.user_id == user_id, UserRole.role_id == role_id
            )
        )
        if result.scalar_one_or_none() is not None:
            return False
        self.db.add(UserRole(user_id=user_id, role_id=role_id))
        await self.db.flush()
        return True

    async def get_role(self, role_id: int) -> RoleResult | None:
        role = await self.db.get(Role, role_id)
        return _role_to_result(role) if role else None

    async def list_roles(self, is_active: bool | None = None) -> list[RoleResult]:
        query = select(Role).order_by(Role.name)
        if is_active is not None:
            query = query.where(Role.is_active.is_(is_active))
        result = await self.db.execute(query)
        return [_role_to_result(r) for r in result.scalars().all()]

    async def get_roles(self, role_ids: Iterable[int]) -> list[RoleResult]:
        ids = set(role_ids)
        if not ids:
            return []
        result = await self.db.execute(select(Role).where(Role.id.in_(ids)))
        return [_role_to_result(r) for r in result.scalars().all()]

    async def get_roles_for_users(
        self, user_ids: Iterable[int]
    ) -> dict[int, list[RoleResult]]:
        """Assigned roles per user, ordered by code. Users without roles are absent."""
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.db.execute(
            select(UserRole.user_id, Role)
            .join(Role, Role.id == UserRole.role_id)
            .where(UserRole.user_id.in_(ids))
            .order_by(Role.code)
        )
        roles: dict[int, list[RoleResult]] = defaultdict(list)
        for user_id, role in result.all():
            roles[user_id].append(_role_to_result(role))
        return dict(roles)

    async def set_user_roles(self, user_id: int, role_ids: Iterable[int]) -> None:
        """Make role_ids exactly the user's roles."""
        wanted = set(role_ids)
        result = await self.db.execute(
            select(UserRole.role_id).where(UserRole.user_id == user_id)
        )
        current = set(result.scalars().all())
        stale = current - wanted
        if stale:
            await self.db.execute(
                delete(UserRole).where(
                    UserRole.user_id == user_id, UserRole.role_id.in_(stale)
                )
            )
        for role_id in sorted(wanted - current):
            self.db.add(UserRole(user_id=user_id, role_id=role_id))
        await self.db.flush()
