"""Tests for DocumentAvailabilityService (fake document and document-type repos)."""

from datetime import timedelta

import pytest

from transparency_portal.application.dtos.category import CategoryResult
from transparency_portal.application.dtos.document import DocumentResult
from transparency_portal.application.dtos.document_type import DocumentTypeResult
from transparency_portal.application.services import DocumentAvailabilityService
from transparency_portal.shared.utils.datetime import utc_now


def _category(category_id: int, accepts_documents: bool = True) -> CategoryResult:
    return CategoryResult(
        id=category_id,
        name=f"Category {category_id}",
        description=None,
        level_description=None,
        icon=None,
        order=0,
        level=0,
        accepts_documents=accepts_documents,
        parent_id=None,
        is_active=True,
    )


def _document(
    document_id: int, category_id: int, document_type_id: int | None, age_days: int
) -> DocumentResult:
    created = utc_now() - timedelta(days=age_days)
    return DocumentResult(
        id=document_id,
        name=f"doc-{document_id}",
        description=None,
        category_id=category_id,
        document_type_id=document_type_id,
        fiscal_year=2024,
        periodicity=None,
        issuing_institution=None,
        storage_path=f"category-{category_id}/doc-{document_id}.csv",
        original_filename=None,
        extension="csv",
        content_type="text/csv",
        file_size=10,
        checksum=None,
        publication_date=created,
        is_active=True,
        created_at=created,
    )


CSV = DocumentTypeResult(id=1, name="CSV", extensions="csv", is_active=True)
EXCEL = DocumentTypeResult(id=2, name="Excel", extensions="XLSX, xls", is_active=True)
BARE = DocumentTypeResult(id=3, name="PDF", extensions="", is_active=True)


class FakeDocumentTypeRepo:
    def __init__(self, types: list[DocumentTypeResult]) -> None:
        self.types = types

    async def list_active(self) -> list[DocumentTypeResult]:
        return list(self.types)


class FakeDocumentRepo:
    """Returns active documents of the requested categories newest first, like the real one."""

    def __init__(self, documents: list[DocumentResult]) -> None:
        self.documents = documents
        self.requested: list[list[int]] = []

    async def list_active_for_categories(self, category_ids) -> list[DocumentResult]:
        ids = set(category_ids)
        self.requested.append(sorted(ids))
        hits = [d for d in self.documents if d.category_id in ids and d.is_active]
        return sorted(hits, key=lambda d: d.created_at, reverse=True)


@pytest.fixture
def make_service():
    def _make(
        documents: list[DocumentResult],
        types: list[DocumentTypeResult] | None = None,
    ) -> tuple[DocumentAvailabilityService, FakeDocumentRepo]:
        doc_repo = FakeDocumentRepo(documents)
        service = DocumentAvailabilityService(
            document_type_repo=FakeDocumentTypeRepo(types or [CSV, EXCEL]),
            document_repo=doc_repo,
        )
        return service, doc_repo

    return _make


async def test_newest_document_wins(make_service) -> None:
    """Yesterday's and today's CSV: available, and the record points at today's."""
    yesterday = _document(10, category_id=1, document_type_id=CSV.id, age_days=1)
    today = _document(11, category_id=1, document_type_id=CSV.id, age_days=0)
    service, _ = make_service([yesterday, today])

    result = await service.get_availability([_category(1)])

    csv_record = result[1][0]
    assert csv_record.available is True
    assert csv_record.document_id == 11
    assert csv_record.document_name == "doc-11"


async def test_every_active_type_gets_a_record(make_service) -> None:
    """A type with no document still appears, marked unavailable, in type order."""
    service, _ = make_service([_document(10, 1, CSV.id, 0)])

    records = (await service.get_availability([_category(1)]))[1]

    assert [r.document_type_id for r in records] == [CSV.id, EXCEL.id]
    excel = records[1]
    assert excel.available is False
    assert excel.document_id is None
    assert excel.document_name is None


async def test_category_without_documents_has_all_unavailable(make_service) -> None:
    service, _ = make_service([])
    records = (await service.get_availability([_category(1)]))[1]
    assert [r.available for r in records] == [False, False]


async def test_categories_not_accepting_documents_are_excluded(make_service) -> None:
    service, doc_repo = make_service([_document(10, 2, CSV.id, 0)])

    result = await service.get_availability([_category(1), _category(2, accepts_documents=False)])

    assert set(result) == {1}
    assert doc_repo.requested == [[1]]


async def test_no_candidates_skips_queries(make_service) -> None:
    service, doc_repo = make_service([])
    assert await service.get_availability([_category(1, accepts_documents=False)]) == {}
    assert doc_repo.requested == []


async def test_extension_is_primary_extension_or_name(make_service) -> None:
    service, _ = make_service([], types=[EXCEL, BARE])
    records = (await service.get_availability([_category(1)]))[1]
    assert [r.extension for r in records] == ["xlsx", "pdf"]


async def test_untyped_documents_do_not_count(make_service) -> None:
    service, _ = make_service([_document(10, 1, None, 0)])
    records = (await service.get_availability([_category(1)]))[1]
    assert not any(r.available for r in records)


async def test_repeated_calls_give_equal_results(make_service) -> None:
    service, _ = make_service([_document(10, 1, CSV.id, 0), _document(12, 1, EXCEL.id, 2)])
    first = await service.get_availability([_category(1)])
    second = await service.get_availability([_category(1)])
    assert first == second


async def test_get_for_category_returns_none_when_not_accepting(make_service) -> None:
    service, _ = make_service([])
    assert await service.get_for_category(_category(1, accepts_documents=False)) is None
    assert len(await service.get_for_category(_category(1))) == 2
