"""Persistence repositories. Re-exports for dependency injection."""

from transparency_portal.infrastructure.persistence.repositories.base import (
    BaseRepository,
)
from transparency_portal.infrastructure.persistence.repositories.category_repo import (
    CategoryRepository,
)
from transparency_portal.infrastructure.persistence.repositories.document_repo import (
    DocumentRepository,
)
from transparency_portal.infrastructure.persistence.repositories.document_type_repo import (
    DocumentTypeRepository,
)
from transparency_portal.infrastructure.persistence.repositories.rbac_repo import (
    RbacRepository,
)
from transparency_portal.infrastructure.persistence.repositories.user_repo import (
    UserRepository,
)

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "DocumentRepository",
    "DocumentTypeRepository",
    "RbacRepository",
    "UserRepository",
]
