"""Document dependencies: search, upload and query services."""

from __future__ import annotations

from functools import partial
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from transparency_portal.application.interfaces.services import ICacheService
from transparency_portal.application.services import DescendantResolver
from transparency_portal.application.use_cases.documents import (
    DocumentQueryService,
    DocumentSearchService,
    DocumentUploadService,
)
from transparency_portal.core.config import get_settings
from transparency_portal.infrastructure.external.storage.protocol import StorageProtocol
from transparency_portal.infrastructure.persistence.database import (
    after_commit,
    get_db_transactional,
)
from transparency_portal.infrastructure.persistence.repositories import (
    CategoryRepository,
    DocumentRepository,
    DocumentTypeRepository,
)

from .catalog import get_category_repo, get_descendant_resolver, get_document_repo
from .common import get_cache, get_storage_service


def get_document_search_service(
    document_repo: Annotated[DocumentRepository, Depends(get_document_repo)],
    category_repo: Annotated[CategoryRepository, Depends(get_category_repo)],
    resolver: Annotated[DescendantResolver, Depends(get_descendant_resolver)],
) -> DocumentSearchService:
    return DocumentSearchService(document_repo, category_repo, resolver)


def get_document_query_service(
    document_repo: Annotated[DocumentRepository, Depends(get_document_repo)],
    storage: Annotated[StorageProtocol, Depends(get_storage_service)],
) -> DocumentQueryService:
    return DocumentQueryService(document_repo, storage)


def get_document_upload_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    storage: Annotated[StorageProtocol, Depends(get_storage_service)],
    cache: Annotated[ICacheService | None, Depends(get_cache)],
) -> DocumentUploadService:
    """Upload service; all repositories share the request transaction.

    Replaced files are deleted only after that transaction commits.
    """
    settings = get_settings()
    return DocumentUploadService(
        storage,
        DocumentRepository(db),
        CategoryRepository(db, cache_service=cache),
        DocumentTypeRepository(db),
        allowed_extensions=settings.upload_extensions,
        max_upload_size=settings.max_upload_size,
        default_institution=settings.default_issuing_institution,
        defer_until_commit=partial(after_commit, db),
    )
