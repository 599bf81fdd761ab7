"""DocumentType repository (read-mostly reference data)."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from transparency_portal.application.dtos.document_type import DocumentTypeResult
from transparency_portal.infrastructure.persistence.models.document_type import (
    DocumentType,
)
from transparency_portal.infrastructure.persistence.repositories.base import (
    BaseRepository,
)


def _to_result(t: DocumentType) -> DocumentTypeResult:
    return DocumentTypeResult(
        id=t.id,
        name=t.name,
        extensions=t.extensions or "",
        is_active=t.is_active,
    )


class DocumentTypeRepository(BaseRepository[DocumentType]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, DocumentType)

    async def get_active(self, document_type_id: int) -> DocumentTypeResult | None:
        result = await self.db.execute(
            select(DocumentType).where(
                DocumentType.id == document_type_id,
                DocumentType.is_active.is_(True),
            )
        )
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def list_active(self) -> list[DocumentTypeResult]:
        """Active types ordered by name; availability records follow this order."""
        result = await self.db.execute(
            select(DocumentType)
            .where(DocumentType.is_active.is_(True))
            .order_by(DocumentType.name.asc(), DocumentType.id.asc())
        )
        return [_to_result(t) for t in result.scalars().all()]

    async def create_type(self, name: str, extensions: str) -> DocumentTypeResult:
        row = await self.create(DocumentType(name=name, extensions=extensions))
        return _to_result(row)

    async def get_by_name(self, name: str) -> DocumentTypeResult | None:
        result = await self.db.execute(
            select(DocumentType).where(DocumentType.name == name)
        )
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None
