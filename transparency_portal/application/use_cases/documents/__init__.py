"""Document use cases: upload/update/delete, reads and scoped search."""

from transparency_portal.application.use_cases.documents.document_operations import (
    DocumentQueryService,
    DocumentUploadService,
)
from transparency_portal.application.use_cases.documents.document_search import (
    DocumentSearchService,
)

__all__ = [
    "DocumentQueryService",
    "DocumentSearchService",
    "DocumentUploadService",
]
