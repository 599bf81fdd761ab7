"""Category (catalog) API schemas."""

from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
)

from transparency_portal.application.dtos.category import (
    CategoryResult,
    CategorySearchMatch,
    CategoryTreeNode,
)
from transparency_portal.application.dtos.document import AvailabilityRecord


class CategoryCreateRequest(BaseModel):
    """Request body for creating a category. Level is derived from the parent."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    level_description: str | None = Field(default=None, max_length=100)
    icon: str | None = Field(default=None, max_length=100)
    parent_id: int | None = Field(default=None, ge=1)
    order: int = Field(default=0, ge=0)
    accepts_documents: bool = False
    is_active: bool = True


class CategoryUpdateRequest(BaseModel):
    """Request body for PATCH (partial). Send parent_id: null to move a category to the root."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    level_description: str | None = Field(default=None, max_length=100)
    icon: str | None = Field(default=None, max_length=100)
    parent_id: int | None = Field(default=None, ge=1)
    order: int | None = Field(default=None, ge=0)
    accepts_documents: bool | None = None
    is_active: bool | None = None

    @field_validator("name", "order", "accepts_documents", "is_active", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        """These columns are NOT NULL; omit the field to leave it unchanged."""
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class CategoryOrderRequest(BaseModel):
    order: int = Field(..., ge=0)


class AvailabilityResponse(BaseModel):
    """Per document type: is there an active document in the category, and which is newest."""

    model_config = ConfigDict(from_attributes=True)

    document_type_id: int
    document_type_name: str
    available: bool
    extension: str
    document_id: int | None = None
    document_name: str | None = None


class CategoryResponse(BaseModel):
    """Category response; document_availability is present only for categories accepting documents."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    level_description: str | None = None
    icon: str | None = None
    order: int
    level: int
    accepts_documents: bool
    parent_id: int | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    document_availability: list[AvailabilityResponse] | None = None

    @model_serializer(mode="wrap")
    def _drop_missing_availability(
        self, handler: SerializerFunctionWrapHandler
    ) -> dict[str, Any]:
        data = handler(self)
        if data.get("document_availability") is None:
            data.pop("document_availability", None)
        return data

    @classmethod
    def from_result(
        cls,
        result: CategoryResult,
        availability: dict[int, list[AvailabilityRecord]] | None = None,
    ) -> "CategoryResponse":
        response = cls.model_validate(result)
        if availability is not None and result.accepts_documents:
            response.document_availability = [
                AvailabilityResponse.model_validate(r)
                for r in availability.get(result.id, [])
            ]
        return response


class CategoryWithChildrenResponse(CategoryResponse):
    children: list[CategoryResponse] = Field(default_factory=list)


class CategoryPathItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    level: int


class CategoryTreeNodeResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    icon: str | None = None
    order: int
    level: int
    accepts_documents: bool
    parent_id: int | None = None
    children: list["CategoryTreeNodeResponse"] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: CategoryTreeNode) -> "CategoryTreeNodeResponse":
        c = node.category
        return cls(
            id=c.id,
            name=c.name,
            description=c.description,
            icon=c.icon,
            order=c.order,
            level=c.level,
            accepts_documents=c.accepts_documents,
            parent_id=c.parent_id,
            children=[cls.from_node(child) for child in node.children],
        )


class CategorySearchResultResponse(BaseModel):
    category: CategoryResponse
    path: list[CategoryPathItemResponse]

    @classmethod
    def from_match(
        cls,
        match: CategorySearchMatch,
        availability: dict[int, list[AvailabilityRecord]] | None = None,
    ) -> "CategorySearchResultResponse":
        return cls(
            category=CategoryResponse.from_result(match.category, availability),
            path=[CategoryPathItemResponse.model_validate(p) for p in match.path],
        )


class CategoryCountResponse(BaseModel):
    total: int
