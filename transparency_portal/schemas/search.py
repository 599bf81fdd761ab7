"""Public document search API schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from transparency_portal.schemas.document import (
    DocumentResponse,
    ExtensionCount,
    FiscalYearCount,
)

SortField = Literal["name", "publication_date", "fiscal_year", "created_at"]
SortOrder = Literal["asc", "desc"]


class PaginationResponse(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class DocumentSearchResponse(BaseModel):
    """One page of matching active documents."""

    items: list[DocumentResponse]
    pagination: PaginationResponse


class CategoryOptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    level: int


class SearchFiltersResponse(BaseModel):
    """Values for the public search form."""

    fiscal_years: list[int]
    extensions: list[str]
    institutions: list[str]
    categories: list[CategoryOptionResponse]


class DocumentStatisticsResponse(BaseModel):
    total: int
    by_fiscal_year: list[FiscalYearCount] = Field(default_factory=list)
    by_extension: list[ExtensionCount] = Field(default_factory=list)
