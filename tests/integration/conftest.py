"""Factories for repository-level tests (rows are flushed, never committed)."""

from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from transparency_portal.infrastructure.persistence.models import (
    Category,
    Document,
    DocumentType,
)
from transparency_portal.shared.utils.datetime import utc_now


@pytest.fixture
def add_category(db_session: AsyncSession):
    async def _add(
        name: str,
        parent: Category | None = None,
        *,
        order: int = 0,
        accepts_documents: bool = True,
        is_active: bool = True,
    ) -> Category:
        category = Category(
            name=name,
            parent_id=parent.id if parent else None,
            level=parent.level + 1 if parent else 0,
            order=order,
            accepts_documents=accepts_documents,
            is_active=is_active,
        )
        db_session.add(category)
        await db_session.flush()
        return category

    return _add


@pytest.fixture
def add_document_type(db_session: AsyncSession):
    async def _add(name: str, extensions: str) -> DocumentType:
        document_type = DocumentType(name=name, extensions=extensions)
        db_session.add(document_type)
        await db_session.flush()
        return document_type

    return _add


@pytest.fixture
def add_document(db_session: AsyncSession):
    counter = {"n": 0}

    async def _add(
        category: Category,
        name: str = "Document",
        *,
        description: str | None = None,
        document_type: DocumentType | None = None,
        fiscal_year: int = 2024,
        extension: str = "csv",
        periodicity: str | None = None,
        institution: str | None = None,
        age_days: int = 0,
        is_active: bool = True,
    ) -> Document:
        counter["n"] += 1
        created = utc_now() - timedelta(days=age_days)
        document = Document(
            name=name,
            description=description,
            category_id=category.id,
            document_type_id=document_type.id if document_type else None,
            fiscal_year=fiscal_year,
            periodicity=periodicity,
            issuing_institution=institution,
            storage_path=f"category-{category.id}/doc-{counter['n']}.{extension}",
            original_filename=f"doc-{counter['n']}.{extension}",
            extension=extension,
            content_type="text/csv",
            file_size=10,
            publication_date=created,
            created_at=created,
            updated_at=created,
            is_active=is_active,
        )
        db_session.add(document)
        await db_session.flush()
        return document

    return _add


@pytest.fixture
async def tree(add_category) -> dict[str, Category]:
    """X -> {Y, Z}, Z -> W; Q is a separate root; Y -> Off (inactive) -> Hidden."""
    x = await add_category("X")
    y = await add_category("Y", x, order=1)
    z = await add_category("Z", x, order=0)
    w = await add_category("W", z)
    q = await add_category("Q", order=5)
    off = await add_category("Off", y, is_active=False)
    hidden = await add_category("Hidden", off)
    return {"X": x, "Y": y, "Z": z, "W": w, "Q": q, "Off": off, "Hidden": hidden}
