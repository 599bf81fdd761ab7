"""Document administration API: upload, update, soft delete and reporting reads."""

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile

from transparency_portal.api.v1.dependencies import (
    get_document_query_service,
    get_document_upload_service,
    require_permission,
)
from transparency_portal.application.dtos.document import UploadedFile
from transparency_portal.application.dtos.user import UserResult
from transparency_portal.application.use_cases.documents import (
    DocumentQueryService,
    DocumentUploadService,
)
from transparency_portal.core.constants import DEFAULT_RECENT_LIMIT, MAX_RECENT_LIMIT
from transparency_portal.core.limiter import limit_writes
from transparency_portal.schemas.document import (
    CategoryDocumentStatsResponse,
    DocumentAdminResponse,
    FiscalYearCount,
)

router = APIRouter()

Reporter = Annotated[UserResult, Depends(require_permission("report", "read"))]
QueryService = Annotated[DocumentQueryService, Depends(get_document_query_service)]


def _uploaded(file: UploadFile) -> UploadedFile:
    return UploadedFile(
        file_data=file.file,
        filename=file.filename,
        content_type=file.content_type,
    )


@router.post("", response_model=DocumentAdminResponse, status_code=201)
@limit_writes
async def upload_document(
    request: Request,
    current_user: Annotated[UserResult, Depends(require_permission("document", "create"))],
    name: str = Form(..., min_length=1, max_length=255),
    category_id: int = Form(..., ge=1),
    file: UploadFile = File(...),
    description: str | None = Form(None),
    document_type_id: int | None = Form(None, ge=1),
    fiscal_year: int | None = Form(None, ge=1900, le=2999),
    periodicity: str | None = Form(None),
    issuing_institution: str | None = Form(None, max_length=255),
    publication_date: datetime | None = Form(None),
    upload_svc: DocumentUploadService = Depends(get_document_upload_service),
):
    """Upload a file into a category that accepts documents."""
    created = await upload_svc.upload(
        _uploaded(file),
        name=name,
        category_id=category_id,
        description=description,
        document_type_id=document_type_id,
        fiscal_year=fiscal_year,
        periodicity=periodicity,
        issuing_institution=issuing_institution,
        publication_date=publication_date,
        created_by=current_user.id,
    )
    return DocumentAdminResponse.model_validate(created)


@router.patch("/{document_id}", response_model=DocumentAdminResponse)
@limit_writes
async def update_document(
    request: Request,
    document_id: int,
    current_user: Annotated[UserResult, Depends(require_permission("document", "update"))],
    name: str | None = Form(None, min_length=1, max_length=255),
    category_id: int | None = Form(None, ge=1),
    description: str | None = Form(None),
    document_type_id: int | None = Form(None, ge=1),
    fiscal_year: int | None = Form(None, ge=1900, le=2999),
    periodicity: str | None = Form(None),
    issuing_institution: str | None = Form(None, max_length=255),
    publication_date: datetime | None = Form(None),
    file: UploadFile | None = File(None),
    upload_svc: DocumentUploadService = Depends(get_document_upload_service),
):
    """Partial update from form fields; an attached file replaces the stored one."""
    submitted: dict[str, Any] = {
        "name": name,
        "category_id": category_id,
        "description": description,
        "document_type_id": document_type_id,
        "fiscal_year": fiscal_year,
        "periodicity": periodicity,
        "issuing_institution": issuing_institution,
        "publication_date": publication_date,
    }
    changes = {k: v for k, v in submitted.items() if v is not None}
    updated = await upload_svc.update(
        document_id,
        changes,
        upload=_uploaded(file) if file is not None else None,
        updated_by=current_user.id,
    )
    return DocumentAdminResponse.model_validate(updated)


@router.delete("/{document_id}", response_model=DocumentAdminResponse)
@limit_writes
async def delete_document(
    request: Request,
    document_id: int,
    current_user: Annotated[UserResult, Depends(require_permission("document", "delete"))],
    upload_svc: DocumentUploadService = Depends(get_document_upload_service),
):
    """Soft delete; the stored file is kept."""
    deleted = await upload_svc.delete(document_id, deleted_by=current_user.id)
    return DocumentAdminResponse.model_validate(deleted)


@router.get("/search", response_model=list[DocumentAdminResponse])
async def search_documents_by_name(
    query_svc: QueryService,
    _: Reporter,
    q: str = Query(..., description="Name substring, at least 2 characters"),
):
    return [DocumentAdminResponse.model_validate(d) for d in await query_svc.search_by_name(q)]


@router.get("/recent", response_model=list[DocumentAdminResponse])
async def list_recent_documents(
    query_svc: QueryService,
    _: Reporter,
    limit: int = Query(DEFAULT_RECENT_LIMIT, ge=1, le=MAX_RECENT_LIMIT),
):
    return [DocumentAdminResponse.model_validate(d) for d in await query_svc.recent(limit)]


@router.get("/category/{category_id}", response_model=list[DocumentAdminResponse])
async def list_documents_by_category(
    category_id: int,
    query_svc: QueryService,
    _: Reporter,
):
    """Active documents directly in the category (no descendants), newest first."""
    documents = await query_svc.list_by_category(category_id)
    return [DocumentAdminResponse.model_validate(d) for d in documents]


@router.get("/category/{category_id}/stats", response_model=CategoryDocumentStatsResponse)
async def get_category_document_stats(
    category_id: int,
    query_svc: QueryService,
    _: Reporter,
):
    stats = await query_svc.category_stats(category_id)
    return CategoryDocumentStatsResponse(
        category_id=stats.category_id,
        total=stats.total,
        by_fiscal_year=[
            FiscalYearCount(fiscal_year=year, count=count)
            for year, count in stats.by_fiscal_year.items()
        ],
    )


@router.get("/{document_id}", response_model=DocumentAdminResponse)
async def get_document(document_id: int, query_svc: QueryService, _: Reporter):
    return DocumentAdminResponse.model_validate(await query_svc.get_document(document_id))
