"""Catalog dependencies: category repositories, resolver, availability and tree services."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from transparency_portal.application.interfaces.services import ICacheService
from transparency_portal.application.services import (
    DescendantResolver,
    DocumentAvailabilityService,
)
from transparency_portal.application.use_cases.catalog import (
    CatalogTreeService,
    CategoryAdminService,
)
from transparency_portal.core.config import get_settings
from transparency_portal.infrastructure.persistence.database import (
    get_db,
    get_db_transactional,
)
from transparency_portal.infrastructure.persistence.repositories import (
    CategoryRepository,
    DocumentRepository,
    DocumentTypeRepository,
)

from .common import get_cache


async def get_category_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
    cache: Annotated[ICacheService | None, Depends(get_cache)],
) -> CategoryRepository:
    """Category repository for read operations."""
    return CategoryRepository(db, cache_service=cache)


async def get_document_type_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DocumentTypeRepository:
    return DocumentTypeRepository(db)


async def get_document_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DocumentRepository:
    return DocumentRepository(db)


def get_descendant_resolver(
    category_repo: Annotated[CategoryRepository, Depends(get_category_repo)],
    cache: Annotated[ICacheService | None, Depends(get_cache)],
) -> DescendantResolver:
    return DescendantResolver(
        category_repo, cache=cache, ttl=get_settings().descendant_cache_ttl
    )


def get_availability_service(
    document_type_repo: Annotated[DocumentTypeRepository, Depends(get_document_type_repo)],
    document_repo: Annotated[DocumentRepository, Depends(get_document_repo)],
) -> DocumentAvailabilityService:
    return DocumentAvailabilityService(document_type_repo, document_repo)


def get_catalog_tree_service(
    category_repo: Annotated[CategoryRepository, Depends(get_category_repo)],
) -> CatalogTreeService:
    return CatalogTreeService(category_repo)


def get_category_admin_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    cache: Annotated[ICacheService | None, Depends(get_cache)],
) -> CategoryAdminService:
    """Admin service with category and document repos sharing one transaction."""
    return CategoryAdminService(
        CategoryRepository(db, cache_service=cache), DocumentRepository(db)
    )
