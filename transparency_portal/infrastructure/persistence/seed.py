"""Reference data: permissions, roles, document types and the initial admin user.

Every step is idempotent so seeding can be re-run against a live database.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from transparency_portal.infrastructure.persistence.repositories import (
    DocumentTypeRepository,
    RbacRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

PERMISSIONS: dict[str, str] = {
    "*:*": "Full access",
    "category:manage": "Create, update, reorder and delete categories",
    "document:create": "Upload documents",
    "document:update": "Edit document metadata and replace files",
    "document:delete": "Soft-delete documents",
    "report:read": "Read administrative listings and statistics",
    "user:manage": "Manage users",
    "role:manage": "Manage roles and grants",
}

ROLES: dict[str, tuple[str, tuple[str, ...]]] = {
    "admin": ("Administrator", ("*:*",)),
    "uploader": ("Uploader", ("document:create", "report:read")),
    "editor": ("Editor", ("document:create", "document:update", "report:read")),
}

DOCUMENT_TYPES: dict[str, str] = {
    "CSV": "csv",
    "Excel": "xlsx,xls",
    "JSON": "json",
    "XML": "xml",
}


@dataclass(frozen=True)
class AdminAccount:
    username: str
    password: str
    email: str
    full_name: str | None = None


async def seed_rbac(session: AsyncSession) -> dict[str, int]:
    """Ensure permissions and roles exist with their grants. Returns role code -> id."""
    rbac = RbacRepository(session)
    permission_ids = {
        code: await rbac.ensure_permission(code, description)
        for code, description in PERMISSIONS.items()
    }
    role_ids: dict[str, int] = {}
    for code, (name, granted) in ROLES.items():
        role_ids[code] = await rbac.ensure_role(code, name)
        for permission_code in granted:
            await rbac.grant(role_ids[code], permission_ids[permission_code])
    logger.info("Seeded %d permissions and %d roles", len(permission_ids), len(role_ids))
    return role_ids


async def seed_document_types(session: AsyncSession) -> int:
    """Create missing document types. Returns how many were added."""
    repo = DocumentTypeRepository(session)
    added = 0
    for name, extensions in DOCUMENT_TYPES.items():
        if await repo.get_by_name(name) is None:
            await repo.create_type(name, extensions)
            added += 1
    return added


async def seed_admin(session: AsyncSession, account: AdminAccount, role_id: int) -> int:
    """Create the admin user when missing and give it the admin role. Returns the user id."""
    users = UserRepository(session)
    user = await users.get_by_username(account.username)
    if user is None:
        user = await users.create_user(
            username=account.username,
            email=account.email,
            password=account.password,
            full_name=account.full_name,
        )
        logger.info("Created admin user %s", account.username)
    await RbacRepository(session).assign_role(user.id, role_id)
    return user.id


async def seed_all(session: AsyncSession, admin: AdminAccount | None = None) -> None:
    role_ids = await seed_rbac(session)
    await seed_document_types(session)
    if admin is not None:
        await seed_admin(session, admin, role_ids["admin"])
