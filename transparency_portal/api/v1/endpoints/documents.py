"""Public document API: scoped search, filter options, recent, stats and file access."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from transparency_portal.api.v1.dependencies import (
    get_document_query_service,
    get_document_search_service,
)
from transparency_portal.application.dtos.document import DocumentSearchCriteria
from transparency_portal.application.use_cases.documents import (
    DocumentQueryService,
    DocumentSearchService,
)
from transparency_portal.core.constants import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_RECENT_LIMIT,
    MAX_PAGE_SIZE,
    MAX_RECENT_LIMIT,
)
from transparency_portal.schemas.document import (
    DocumentResponse,
    ExtensionCount,
    FiscalYearCount,
)
from transparency_portal.schemas.search import (
    CategoryOptionResponse,
    DocumentSearchResponse,
    DocumentStatisticsResponse,
    PaginationResponse,
    SearchFiltersResponse,
    SortField,
    SortOrder,
)

router = APIRouter()

SearchService = Annotated[DocumentSearchService, Depends(get_document_search_service)]
QueryService = Annotated[DocumentQueryService, Depends(get_document_query_service)]


@router.get("/search", response_model=DocumentSearchResponse)
async def search_documents(
    search_svc: SearchService,
    q: str | None = Query(None, max_length=255, description="Ignored when shorter than 2 characters"),
    category_id: int | None = Query(None, ge=1),
    category_ids: list[int] | None = Query(None, description="Overrides category_id when given"),
    fiscal_year: int | None = Query(None, ge=1900, le=2999),
    document_type_id: int | None = Query(None, ge=1),
    periodicity: str | None = Query(None, max_length=50),
    institution: str | None = Query(None, max_length=255),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    order_by: SortField = Query("publication_date"),
    order: SortOrder = Query("desc"),
):
    """Active documents in a category subtree (or everywhere) matching the filters."""
    result = await search_svc.search(
        DocumentSearchCriteria(
            text=q,
            category_id=category_id,
            category_ids=tuple(category_ids or ()),
            fiscal_year=fiscal_year,
            document_type_id=document_type_id,
            periodicity=periodicity,
            institution=institution,
            page=page,
            page_size=page_size,
            order_by=order_by,
            order=order,
        )
    )
    return DocumentSearchResponse(
        items=[DocumentResponse.model_validate(d) for d in result.items],
        pagination=PaginationResponse(
            page=result.page,
            page_size=result.page_size,
            total=result.total,
            total_pages=result.total_pages,
            has_next_page=result.has_next_page,
            has_prev_page=result.has_prev_page,
        ),
    )


@router.get("/filters", response_model=SearchFiltersResponse)
async def get_search_filters(search_svc: SearchService):
    options = await search_svc.filter_options()
    return SearchFiltersResponse(
        fiscal_years=options.fiscal_years,
        extensions=options.extensions,
        institutions=options.institutions,
        categories=[CategoryOptionResponse.model_validate(c) for c in options.categories],
    )


@router.get("/recent", response_model=list[DocumentResponse])
async def list_recent(
    search_svc: SearchService,
    limit: int = Query(DEFAULT_RECENT_LIMIT, ge=1, le=MAX_RECENT_LIMIT),
):
    return [DocumentResponse.model_validate(d) for d in await search_svc.recent(limit)]


@router.get("/stats", response_model=DocumentStatisticsResponse)
async def get_statistics(search_svc: SearchService):
    stats = await search_svc.statistics()
    return DocumentStatisticsResponse(
        total=stats.total,
        by_fiscal_year=[
            FiscalYearCount(fiscal_year=y, count=n) for y, n in stats.by_fiscal_year.items()
        ],
        by_extension=[
            ExtensionCount(extension=e, count=n) for e, n in stats.by_extension.items()
        ],
    )


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(document_id: int, query_svc: QueryService):
    return DocumentResponse.model_validate(await query_svc.get_document(document_id))


async def _stream(
    document_id: int,
    query_svc: DocumentQueryService,
    disposition: Literal["attachment", "inline"],
) -> StreamingResponse:
    opened = await query_svc.open_file(document_id)
    return StreamingResponse(
        opened.chunks,
        media_type=opened.media_type,
        headers={
            "Content-Disposition": f'{disposition}; filename="{opened.filename}"',
        },
    )


@router.get("/{document_id}/download", response_class=StreamingResponse)
async def download_document(document_id: int, query_svc: QueryService):
    """Stream the file as an attachment."""
    return await _stream(document_id, query_svc, "attachment")


@router.get("/{document_id}/view", response_class=StreamingResponse)
async def view_document(document_id: int, query_svc: QueryService):
    """Stream the file for inline display."""
    return await _stream(document_id, query_svc, "inline")
