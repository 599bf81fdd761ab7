"""Scoped document search and public search helpers (filters, recent, statistics)."""

from __future__ import annotations

import logging
import math

from transparency_portal.application.dtos.document import (
    CategoryOption,
    DocumentFilter,
    DocumentResult,
    DocumentSearchCriteria,
    DocumentSearchPage,
    DocumentStatistics,
    SearchFilterOptions,
)
from transparency_portal.application.interfaces.repositories import (
    ICategoryRepository,
    IDocumentRepository,
)
from transparency_portal.application.services.descendant_resolver import (
    DescendantResolver,
)
from transparency_portal.core.constants import MIN_SEARCH_TERM_LENGTH

logger = logging.getLogger(__name__)


def _effective_text(term: str | None) -> str | None:
    """Trimmed term, or None when shorter than the minimum (ignored, not rejected)."""
    if not term:
        return None
    cleaned = term.strip()
    return cleaned if len(cleaned) >= MIN_SEARCH_TERM_LENGTH else None


class DocumentSearchService:
    """Filtered, paginated search over active documents.

    Category scoping expands through the DescendantResolver, so a search on
    a parent category covers its whole subtree. When both category_ids and
    category_id are given, category_ids wins. Count and page are two
    separate statements; under concurrent writes they may differ slightly.
    """

    def __init__(
        self,
        document_repo: IDocumentRepository,
        category_repo: ICategoryRepository,
        descendant_resolver: DescendantResolver,
    ) -> None:
        self.document_repo = document_repo
        self.category_repo = category_repo
        self.descendant_resolver = descendant_resolver

    async def _resolve_scope(self, criteria: DocumentSearchCriteria) -> frozenset[int] | None:
        if criteria.category_ids:
            if criteria.category_id is not None:
                logger.debug(
                    "category_ids %s overrides category_id %s",
                    criteria.category_ids,
                    criteria.category_id,
                )
            return frozenset(
                await self.descendant_resolver.resolve_many(criteria.category_ids)
            )
        if criteria.category_id is not None:
            return frozenset(await self.descendant_resolver.resolve(criteria.category_id))
        return None

    async def build_filter(self, criteria: DocumentSearchCriteria) -> DocumentFilter:
        return DocumentFilter(
            text=_effective_text(criteria.text),
            category_ids=await self._resolve_scope(criteria),
            fiscal_year=criteria.fiscal_year,
            document_type_id=criteria.document_type_id,
            periodicity=criteria.periodicity or None,
            institution=(criteria.institution or "").strip() or None,
        )

    async def search(self, criteria: DocumentSearchCriteria) -> DocumentSearchPage:
        """Page of active documents plus pagination metadata. Bounds are pre-validated."""
        filters = await self.build_filter(criteria)
        total = await self.document_repo.count(filters)
        items = await self.document_repo.search(
            filters,
            offset=(criteria.page - 1) * criteria.page_size,
            limit=criteria.page_size,
            order_by=criteria.order_by,
            descending=criteria.order.lower() != "asc",
        )
        total_pages = math.ceil(total / criteria.page_size) if criteria.page_size else 0
        return DocumentSearchPage(
            items=items,
            page=criteria.page,
            page_size=criteria.page_size,
            total=total,
            total_pages=total_pages,
            has_next_page=criteria.page < total_pages,
            has_prev_page=criteria.page > 1,
        )

    async def filter_options(self) -> SearchFilterOptions:
        categories = await self.category_repo.get_for_filters()
        return SearchFilterOptions(
            fiscal_years=await self.document_repo.distinct_fiscal_years(),
            extensions=await self.document_repo.distinct_extensions(),
            institutions=await self.document_repo.distinct_institutions(),
            categories=[
                CategoryOption(id=c.id, name=c.name, level=c.level) for c in categories
            ],
        )

    async def recent(self, limit: int) -> list[DocumentResult]:
        return await self.document_repo.list_recent(limit)

    async def statistics(self) -> DocumentStatistics:
        return DocumentStatistics(
            total=await self.document_repo.count_active(),
            by_fiscal_year=await self.document_repo.count_by_fiscal_year(),
            by_extension=await self.document_repo.count_by_extension(),
        )
