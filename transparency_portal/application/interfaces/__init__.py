"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations.
No runtime imports from transparency_portal.infrastructure.
"""

from transparency_portal.application.interfaces.repositories import (
    ICategoryRepository,
    IDocumentRepository,
    IDocumentTypeRepository,
    IUserRepository,
)
from transparency_portal.application.interfaces.services import (
    ICacheService,
    IPermissionResolver,
    IStorageService,
)

__all__ = [
    "ICacheService",
    "ICategoryRepository",
    "IDocumentRepository",
    "IDocumentTypeRepository",
    "IPermissionResolver",
    "IStorageService",
    "IUserRepository",
]
