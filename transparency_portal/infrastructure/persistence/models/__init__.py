"""Persistence models: ORM entities and mixins."""

from transparency_portal.infrastructure.persistence.models.category import Category
from transparency_portal.infrastructure.persistence.models.document import Document
from transparency_portal.infrastructure.persistence.models.document_type import (
    DocumentType,
)
from transparency_portal.infrastructure.persistence.models.mixins import (
    ActiveFlagMixin,
    IntegerPkMixin,
    TimestampMixin,
    UserAuditMixin,
)
from transparency_portal.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from transparency_portal.infrastructure.persistence.models.role import Role
from transparency_portal.infrastructure.persistence.models.user import User

__all__ = [
    "ActiveFlagMixin",
    "Category",
    "Document",
    "DocumentType",
    "IntegerPkMixin",
    "Permission",
    "Role",
    "RolePermission",
    "TimestampMixin",
    "User",
    "UserAuditMixin",
    "UserRole",
]
