"""Infrastructure services backed by the database."""

from transparency_portal.infrastructure.services.permission_resolver import (
    PermissionResolver,
)

__all__ = ["PermissionResolver"]
