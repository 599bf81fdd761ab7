"""Document type API schemas."""

from pydantic import BaseModel

from transparency_portal.application.dtos.document_type import DocumentTypeResult


class DocumentTypeResponse(BaseModel):
    id: int
    name: str
    extensions: str | None
    primary_extension: str
    is_active: bool

    @classmethod
    def from_result(cls, result: DocumentTypeResult) -> "DocumentTypeResponse":
        return cls(
            id=result.id,
            name=result.name,
            extensions=result.extensions,
            primary_extension=result.primary_extension,
            is_active=result.is_active,
        )


class PeriodicitiesResponse(BaseModel):
    periodicities: list[str]
