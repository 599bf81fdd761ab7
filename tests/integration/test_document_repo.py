"""Integration tests for DocumentRepository filters, sorting and aggregates."""

import pytest

from transparency_portal.application.dtos.document import DocumentFilter
from transparency_portal.infrastructure.persistence.repositories import DocumentRepository


@pytest.fixture
async def corpus(tree, add_document, add_document_type):
    csv = await add_document_type("CSV", "csv")
    budget = await add_document(
        tree["X"],
        "Budget 2024",
        document_type=csv,
        institution="Finance Ministry",
        periodicity="annual",
        age_days=3,
    )
    payroll = await add_document(
        tree["W"],
        "Payroll",
        description="Monthly budget payroll",
        fiscal_year=2023,
        extension="xlsx",
        periodicity="monthly",
        age_days=2,
    )
    audit = await add_document(
        tree["Q"],
        "Audit 100%",
        fiscal_year=2023,
        institution="Audit Office",
        age_days=1,
    )
    old = await add_document(tree["X"], "Budget draft", is_active=False)
    return {"csv": csv, "budget": budget, "payroll": payroll, "audit": audit, "old": old}


async def _names(repo: DocumentRepository, filters: DocumentFilter, **kwargs) -> list[str]:
    options = {"offset": 0, "limit": 50, "order_by": "created_at", "descending": True}
    options.update(kwargs)
    return [d.name for d in await repo.search(filters, **options)]


async def test_unfiltered_search_returns_active_documents(db_session, corpus) -> None:
    repo = DocumentRepository(db_session)
    assert await _names(repo, DocumentFilter()) == ["Audit 100%", "Payroll", "Budget 2024"]
    assert await repo.count(DocumentFilter()) == 3


async def test_text_matches_name_or_description(db_session, corpus) -> None:
    repo = DocumentRepository(db_session)
    names = await _names(repo, DocumentFilter(text="BUDGET"))
    assert names == ["Payroll", "Budget 2024"]


async def test_text_wildcards_are_literal(db_session, corpus) -> None:
    repo = DocumentRepository(db_session)
    assert await _names(repo, DocumentFilter(text="0%")) == ["Audit 100%"]
    assert await _names(repo, DocumentFilter(text="t_1")) == []


async def test_category_scope(db_session, corpus, tree) -> None:
    repo = DocumentRepository(db_session)
    scope = frozenset({tree["X"].id, tree["W"].id})
    assert await _names(repo, DocumentFilter(category_ids=scope)) == ["Payroll", "Budget 2024"]
    assert await _names(repo, DocumentFilter(category_ids=frozenset())) == []
    assert await repo.count(DocumentFilter(category_ids=frozenset())) == 0


async def test_exact_and_partial_filters(db_session, corpus) -> None:
    repo = DocumentRepository(db_session)
    assert await _names(repo, DocumentFilter(fiscal_year=2023)) == ["Audit 100%", "Payroll"]
    assert await _names(repo, DocumentFilter(document_type_id=corpus["csv"].id)) == ["Budget 2024"]
    assert await _names(repo, DocumentFilter(periodicity="monthly")) == ["Payroll"]
    assert await _names(repo, DocumentFilter(institution="ministry")) == ["Budget 2024"]


async def test_sorting_and_paging(db_session, corpus) -> None:
    repo = DocumentRepository(db_session)
    assert await _names(repo, DocumentFilter(), order_by="name", descending=False) == [
        "Audit 100%", "Budget 2024", "Payroll",
    ]
    second = await _names(
        repo, DocumentFilter(), order_by="name", descending=False, offset=1, limit=1
    )
    assert second == ["Budget 2024"]
    assert await _names(repo, DocumentFilter(), order_by="unknown") == [
        "Audit 100%", "Payroll", "Budget 2024",
    ]


async def test_list_active_for_categories_newest_first(db_session, corpus, tree) -> None:
    repo = DocumentRepository(db_session)
    docs = await repo.list_active_for_categories([tree["X"].id, tree["W"].id])
    assert [d.name for d in docs] == ["Payroll", "Budget 2024"]
    assert await repo.list_active_for_categories([]) == []


async def test_distinct_values_and_aggregates(db_session, corpus, tree) -> None:
    repo = DocumentRepository(db_session)
    assert await repo.distinct_fiscal_years() == [2024, 2023]
    assert await repo.distinct_extensions() == ["csv", "xlsx"]
    assert await repo.distinct_institutions() == ["Audit Office", "Finance Ministry"]
    assert await repo.count_by_fiscal_year() == {2024: 1, 2023: 2}
    assert await repo.count_by_extension() == {"csv": 2, "xlsx": 1}
    assert await repo.count_active() == 3
    assert await repo.count_active(tree["X"].id) == 1


async def test_get_active_ignores_soft_deleted(db_session, corpus) -> None:
    repo = DocumentRepository(db_session)
    assert await repo.get_active(corpus["old"].id) is None
    assert (await repo.get_by_id(corpus["old"].id)).is_active is False
