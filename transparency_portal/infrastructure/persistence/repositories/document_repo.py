"""Document repository: metadata, filtered search and aggregate counts.

Returns application DTOs. Every read except get_by_id is restricted to
active documents.
"""

from collections.abc import Iterable
from typing import Any

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from transparency_portal.application.dtos.document import (
    DocumentCreate,
    DocumentFilter,
    DocumentResult,
)
from transparency_portal.infrastructure.persistence.models.document import Document
from transparency_portal.infrastructure.persistence.repositories.base import (
    BaseRepository,
)
from transparency_portal.shared.utils.datetime import ensure_utc

# Public sort keys; anything else sorts by creation date
_SORT_COLUMNS: dict[str, Any] = {
    "name": Document.name,
    "publication_date": Document.publication_date,
    "fiscal_year": Document.fiscal_year,
    "created_at": Document.created_at,
}


def _to_result(d: Document) -> DocumentResult:
    """Map ORM Document to DocumentResult."""
    return DocumentResult(
        id=d.id,
        name=d.name,
        description=d.description,
        category_id=d.category_id,
        document_type_id=d.document_type_id,
        fiscal_year=d.fiscal_year,
        periodicity=d.periodicity,
        issuing_institution=d.issuing_institution,
        storage_path=d.storage_path,
        original_filename=d.original_filename,
        extension=d.extension,
        content_type=d.content_type,
        file_size=d.file_size,
        checksum=d.checksum,
        publication_date=ensure_utc(d.publication_date),
        is_active=d.is_active,
        created_at=ensure_utc(d.created_at),
        updated_at=ensure_utc(d.updated_at),
        created_by=d.created_by,
        updated_by=d.updated_by,
    )


def _apply_filters(stmt: Select, filters: DocumentFilter) -> Select:
    """Add the search predicate. Text, when present, is already trimmed and long enough."""
    stmt = stmt.where(Document.is_active.is_(True))
    if filters.text:
        term = filters.text.lower()
        stmt = stmt.where(
            or_(
                func.lower(Document.name).contains(term, autoescape=True),
                func.lower(Document.description).contains(term, autoescape=True),
            )
        )
    if filters.category_ids is not None:
        stmt = stmt.where(Document.category_id.in_(filters.category_ids))
    if filters.fiscal_year is not None:
        stmt = stmt.where(Document.fiscal_year == filters.fiscal_year)
    if filters.document_type_id is not None:
        stmt = stmt.where(Document.document_type_id == filters.document_type_id)
    if filters.periodicity:
        stmt = stmt.where(Document.periodicity == filters.periodicity)
    if filters.institution:
        stmt = stmt.where(
            func.lower(Document.issuing_institution).contains(
                filters.institution.lower(), autoescape=True
            )
        )
    return stmt


class DocumentRepository(BaseRepository[Document]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Document)

    async def _list(self, stmt: Any) -> list[DocumentResult]:
        result = await self.db.execute(stmt)
        return [_to_result(d) for d in result.scalars().all()]

    def _active(self) -> Select:
        return select(Document).where(Document.is_active.is_(True))

    async def get_by_id(self, document_id: int) -> DocumentResult | None:
        row = await self._get_row(document_id)
        return _to_result(row) if row else None

    async def get_active(self, document_id: int) -> DocumentResult | None:
        result = await self.db.execute(self._active().where(Document.id == document_id))
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def list_active_for_categories(
        self, category_ids: Iterable[int]
    ) -> list[DocumentResult]:
        ids = set(category_ids)
        if not ids:
            return []
        return await self._list(
            self._active()
            .where(Document.category_id.in_(ids))
            .order_by(Document.created_at.desc(), Document.id.desc())
        )

    async def list_by_category(self, category_id: int) -> list[DocumentResult]:
        return await self._list(
            self._active()
            .where(Document.category_id == category_id)
            .order_by(Document.created_at.desc(), Document.id.desc())
        )

    async def count_active_in_category(self, category_id: int) -> int:
        return await self.count_active(category_id)

    async def search(
        self,
        filters: DocumentFilter,
        *,
        offset: int,
        limit: int,
        order_by: str,
        descending: bool,
    ) -> list[DocumentResult]:
        column = _SORT_COLUMNS.get(order_by, Document.created_at)
        if descending:
            ordering = (column.desc(), Document.id.desc())
        else:
            ordering = (column.asc(), Document.id.asc())
        stmt = (
            _apply_filters(select(Document), filters)
            .order_by(*ordering)
            .offset(offset)
            .limit(limit)
        )
        return await self._list(stmt)

    async def count(self, filters: DocumentFilter) -> int:
        stmt = _apply_filters(select(func.count(Document.id)), filters)
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    async def search_by_name(self, term: str) -> list[DocumentResult]:
        return await self._list(
            self._active()
            .where(func.lower(Document.name).contains(term.lower(), autoescape=True))
            .order_by(Document.created_at.desc(), Document.id.desc())
        )

    async def list_recent(self, limit: int) -> list[DocumentResult]:
        return await self._list(
            self._active()
            .order_by(Document.publication_date.desc(), Document.id.desc())
            .limit(limit)
        )

    async def distinct_fiscal_years(self) -> list[int]:
        result = await self.db.execute(
            select(Document.fiscal_year)
            .where(Document.is_active.is_(True))
            .distinct()
            .order_by(Document.fiscal_year.desc())
        )
        return [int(y) for y in result.scalars().all()]

    async def distinct_extensions(self) -> list[str]:
        result = await self.db.execute(
            select(Document.extension)
            .where(Document.is_active.is_(True))
            .distinct()
            .order_by(Document.extension.asc())
        )
        return list(result.scalars().all())

    async def distinct_institutions(self) -> list[str]:
        result = await self.db.execute(
            select(Document.issuing_institution)
            .where(
                Document.is_active.is_(True),
                Document.issuing_institution.is_not(None),
                Document.issuing_institution != "",
            )
            .distinct()
            .order_by(Document.issuing_institution.asc())
        )
        return list(result.scalars().all())

    async def count_by_fiscal_year(self, category_id: int | None = None) -> dict[int, int]:
        stmt = select(Document.fiscal_year, func.count(Document.id)).where(
            Document.is_active.is_(True)
        )
        if category_id is not None:
            stmt = stmt.where(Document.category_id == category_id)
        stmt = stmt.group_by(Document.fiscal_year).order_by(Document.fiscal_year.desc())
        result = await self.db.execute(stmt)
        return {int(year): int(n) for year, n in result.all()}

    async def count_by_extension(self) -> dict[str, int]:
        result = await self.db.execute(
            select(Document.extension, func.count(Document.id))
            .where(Document.is_active.is_(True))
            .group_by(Document.extension)
            .order_by(func.count(Document.id).desc(), Document.extension.asc())
        )
        return {ext: int(n) for ext, n in result.all()}

    async def count_active(self, category_id: int | None = None) -> int:
        stmt = select(func.count(Document.id)).where(Document.is_active.is_(True))
        if category_id is not None:
            stmt = stmt.where(Document.category_id == category_id)
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    async def create_document(self, data: DocumentCreate) -> DocumentResult:
        fields = {k: v for k, v in vars(data).items() if v is not None}
        row = await self.create(Document(**fields))
        return _to_result(row)

    async def update_document(self, document_id: int, **fields: Any) -> DocumentResult:
        row = await self._require_row(document_id)
        row = await self.update(row, **fields)
        return _to_result(row)
