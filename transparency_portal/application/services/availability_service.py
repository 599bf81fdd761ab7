"""Document availability: per category and active document type, is there an active document?"""

from __future__ import annotations

from collections.abc import Iterable

from transparency_portal.application.dtos.category import CategoryResult
from transparency_portal.application.dtos.document import (
    AvailabilityRecord,
    DocumentResult,
)
from transparency_portal.application.interfaces.repositories import (
    IDocumentRepository,
    IDocumentTypeRepository,
)


class DocumentAvailabilityService:
    """Builds availability records for categories that accept documents.

    Categories with accepts_documents False never appear in the result.
    A qualifying category always gets one record per active document type,
    in document-type load order, even when it has no documents.
    """

    def __init__(
        self,
        document_type_repo: IDocumentTypeRepository,
        document_repo: IDocumentRepository,
    ) -> None:
        self.document_type_repo = document_type_repo
        self.document_repo = document_repo

    async def get_availability(
        self, categories: Iterable[CategoryResult]
    ) -> dict[int, list[AvailabilityRecord]]:
        candidate_ids = [c.id for c in categories if c.accepts_documents]
        if not candidate_ids:
            return {}

        document_types = await self.document_type_repo.list_active()
        documents = await self.document_repo.list_active_for_categories(candidate_ids)

        # Documents arrive newest first, so the first one seen per pair is the latest
        latest: dict[int, dict[int, DocumentResult]] = {}
        for doc in documents:
            if doc.document_type_id is None:
                continue
            by_type = latest.setdefault(doc.category_id, {})
            by_type.setdefault(doc.document_type_id, doc)

        availability: dict[int, list[AvailabilityRecord]] = {}
        for category_id in candidate_ids:
            by_type = latest.get(category_id, {})
            records = []
            for doc_type in document_types:
                doc = by_type.get(doc_type.id)
                records.append(
                    AvailabilityRecord(
                        document_type_id=doc_type.id,
                        document_type_name=doc_type.name,
                        available=doc is not None,
                        extension=doc_type.primary_extension,
                        document_id=doc.id if doc else None,
                        document_name=doc.name if doc else None,
                    )
                )
            availability[category_id] = records
        return availability

    async def get_for_category(
        self, category: CategoryResult
    ) -> list[AvailabilityRecord] | None:
        """Records for a single category; None when it does not accept documents."""
        result = await self.get_availability([category])
        return result.get(category.id)
