"""DTOs for documents, availability and search (no dependency on ORM)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO


@dataclass(frozen=True)
class DocumentResult:
    """Document read-model."""

    id: int
    name: str
    description: str | None
    category_id: int
    document_type_id: int | None
    fiscal_year: int
    periodicity: str | None
    issuing_institution: str | None
    storage_path: str
    original_filename: str | None
    extension: str
    content_type: str | None
    file_size: int
    checksum: str | None
    publication_date: datetime | None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: int | None = None
    updated_by: int | None = None


@dataclass(frozen=True)
class DocumentCreate:
    """Metadata persisted for a new upload (file already stored)."""

    name: str
    description: str | None
    category_id: int
    document_type_id: int | None
    fiscal_year: int
    periodicity: str | None
    issuing_institution: str | None
    storage_path: str
    original_filename: str | None
    extension: str
    content_type: str | None
    file_size: int
    checksum: str | None
    publication_date: datetime | None = None
    created_by: int | None = None


@dataclass(frozen=True)
class AvailabilityRecord:
    """Whether a category holds at least one active document of a type, and the newest one."""

    document_type_id: int
    document_type_name: str
    available: bool
    extension: str
    document_id: int | None = None
    document_name: str | None = None


@dataclass(frozen=True)
class DocumentFilter:
    """Resolved search predicate. category_ids is already expanded to the full subtree.

    category_ids None means unscoped; an empty set matches nothing.
    """

    text: str | None = None
    category_ids: frozenset[int] | None = None
    fiscal_year: int | None = None
    document_type_id: int | None = None
    periodicity: str | None = None
    institution: str | None = None


@dataclass(frozen=True)
class DocumentSearchCriteria:
    """Raw search input; bounds are validated upstream."""

    text: str | None = None
    category_id: int | None = None
    category_ids: tuple[int, ...] = ()
    fiscal_year: int | None = None
    document_type_id: int | None = None
    periodicity: str | None = None
    institution: str | None = None
    page: int = 1
    page_size: int = 20
    order_by: str = "publication_date"
    order: str = "desc"


@dataclass(frozen=True)
class DocumentSearchPage:
    items: list[DocumentResult]
    page: int
    page_size: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


@dataclass(frozen=True)
class CategoryOption:
    id: int
    name: str
    level: int


@dataclass(frozen=True)
class SearchFilterOptions:
    """Values offered by the public search form."""

    fiscal_years: list[int]
    extensions: list[str]
    institutions: list[str]
    categories: list[CategoryOption]


@dataclass(frozen=True)
class DocumentStatistics:
    total: int
    by_fiscal_year: dict[int, int] = field(default_factory=dict)
    by_extension: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class UploadedFile:
    """An incoming file as handed over by the HTTP layer."""

    file_data: BinaryIO
    filename: str | None
    content_type: str | None


@dataclass(frozen=True)
class CategoryDocumentStats:
    category_id: int
    total: int
    by_fiscal_year: dict[int, int]


@dataclass(frozen=True)
class DocumentFile:
    """Stream and headers for serving a stored document."""

    document: DocumentResult
    chunks: AsyncIterator[bytes]
    media_type: str
    filename: str
