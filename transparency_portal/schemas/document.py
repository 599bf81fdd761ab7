"""Document API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DocumentResponse(BaseModel):
    """Document metadata. The storage path stays server-side."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    category_id: int
    document_type_id: int | None = None
    fiscal_year: int
    periodicity: str | None = None
    issuing_institution: str | None = None
    original_filename: str | None = None
    extension: str
    content_type: str | None = None
    file_size: int
    publication_date: datetime | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DocumentAdminResponse(DocumentResponse):
    """Admin view: includes storage details and audit ids."""

    storage_path: str
    checksum: str | None = None
    created_by: int | None = None
    updated_by: int | None = None


class FiscalYearCount(BaseModel):
    fiscal_year: int
    count: int


class ExtensionCount(BaseModel):
    extension: str
    count: int


class CategoryDocumentStatsResponse(BaseModel):
    category_id: int
    total: int
    by_fiscal_year: list[FiscalYearCount] = Field(default_factory=list)
