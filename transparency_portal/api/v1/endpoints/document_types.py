"""Public document type API."""

from fastapi import APIRouter, Depends

from transparency_portal.api.v1.dependencies import get_document_type_repo
from transparency_portal.core.constants import PERIODICITIES
from transparency_portal.infrastructure.persistence.repositories import (
    DocumentTypeRepository,
)
from transparency_portal.schemas.document_type import (
    DocumentTypeResponse,
    PeriodicitiesResponse,
)

router = APIRouter()


@router.get("", response_model=list[DocumentTypeResponse])
async def list_document_types(
    repo: DocumentTypeRepository = Depends(get_document_type_repo),
):
    """Active document types ordered by name."""
    return [DocumentTypeResponse.from_result(t) for t in await repo.list_active()]


@router.get("/periodicities", response_model=PeriodicitiesResponse)
async def list_periodicities():
    return PeriodicitiesResponse(periodicities=list(PERIODICITIES))
