"""Tests for DocumentSearchService (AsyncMock repositories and resolver)."""

from unittest.mock import AsyncMock

import pytest

from transparency_portal.application.dtos.document import DocumentSearchCriteria
from transparency_portal.application.use_cases.documents import DocumentSearchService


@pytest.fixture
def document_repo():
    repo = AsyncMock()
    repo.count.return_value = 0
    repo.search.return_value = []
    return repo


@pytest.fixture
def resolver():
    r = AsyncMock()
    r.resolve.return_value = {1, 2, 3, 4}
    r.resolve_many.return_value = {7, 8}
    return r


@pytest.fixture
def service(document_repo, resolver) -> DocumentSearchService:
    return DocumentSearchService(
        document_repo=document_repo,
        category_repo=AsyncMock(),
        descendant_resolver=resolver,
    )


@pytest.mark.parametrize("term", [None, "", " ", "a", "  b  "])
async def test_short_text_is_ignored(service: DocumentSearchService, term) -> None:
    filters = await service.build_filter(DocumentSearchCriteria(text=term))
    assert filters.text is None


async def test_text_is_trimmed(service: DocumentSearchService) -> None:
    filters = await service.build_filter(DocumentSearchCriteria(text="  budget "))
    assert filters.text == "budget"


async def test_unscoped_search_has_no_category_filter(
    service: DocumentSearchService, resolver
) -> None:
    filters = await service.build_filter(DocumentSearchCriteria())
    assert filters.category_ids is None
    resolver.resolve.assert_not_called()
    resolver.resolve_many.assert_not_called()


async def test_category_id_expands_to_subtree(service: DocumentSearchService, resolver) -> None:
    filters = await service.build_filter(DocumentSearchCriteria(category_id=1))
    resolver.resolve.assert_awaited_once_with(1)
    assert filters.category_ids == frozenset({1, 2, 3, 4})


async def test_category_ids_override_category_id(
    service: DocumentSearchService, resolver
) -> None:
    filters = await service.build_filter(
        DocumentSearchCriteria(category_id=1, category_ids=(7, 8))
    )
    resolver.resolve.assert_not_called()
    resolver.resolve_many.assert_awaited_once_with((7, 8))
    assert filters.category_ids == frozenset({7, 8})


async def test_inactive_scope_is_empty_not_unscoped(
    service: DocumentSearchService, resolver
) -> None:
    """A scope that resolves to nothing must match nothing."""
    resolver.resolve.return_value = set()
    filters = await service.build_filter(DocumentSearchCriteria(category_id=99))
    assert filters.category_ids == frozenset()


async def test_blank_institution_is_dropped(service: DocumentSearchService) -> None:
    filters = await service.build_filter(DocumentSearchCriteria(institution="   "))
    assert filters.institution is None


async def test_pagination_metadata(service: DocumentSearchService, document_repo) -> None:
    document_repo.count.return_value = 45
    page = await service.search(DocumentSearchCriteria(page=2, page_size=20))

    assert page.total == 45
    assert page.total_pages == 3
    assert page.has_next_page is True
    assert page.has_prev_page is True
    kwargs = document_repo.search.await_args.kwargs
    assert kwargs["offset"] == 20
    assert kwargs["limit"] == 20


async def test_last_page_has_no_next(service: DocumentSearchService, document_repo) -> None:
    document_repo.count.return_value = 40
    page = await service.search(DocumentSearchCriteria(page=2, page_size=20))
    assert page.total_pages == 2
    assert page.has_next_page is False


async def test_empty_result_pagination(service: DocumentSearchService) -> None:
    page = await service.search(DocumentSearchCriteria())
    assert page.total == 0
    assert page.total_pages == 0
    assert page.has_next_page is False
    assert page.has_prev_page is False


@pytest.mark.parametrize(("order", "descending"), [("desc", True), ("asc", False), ("ASC", False)])
async def test_sort_direction(
    service: DocumentSearchService, document_repo, order: str, descending: bool
) -> None:
    await service.search(DocumentSearchCriteria(order_by="name", order=order))
    kwargs = document_repo.search.await_args.kwargs
    assert kwargs["order_by"] == "name"
    assert kwargs["descending"] is descending


async def test_statistics_collects_aggregates(
    service: DocumentSearchService, document_repo
) -> None:
    document_repo.count_active.return_value = 3
    document_repo.count_by_fiscal_year.return_value = {2024: 2, 2023: 1}
    document_repo.count_by_extension.return_value = {"csv": 2, "xlsx": 1}

    stats = await service.statistics()

    assert stats.total == 3
    assert stats.by_fiscal_year == {2024: 2, 2023: 1}
    assert stats.by_extension == {"csv": 2, "xlsx": 1}
