"""Category administration API. Writes need category:manage; reads need report:read."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from transparency_portal.api.v1.dependencies import (
    get_category_admin_service,
    require_permission,
)
from transparency_portal.application.dtos.user import UserResult
from transparency_portal.application.use_cases.catalog import CategoryAdminService
from transparency_portal.core.limiter import limit_writes
from transparency_portal.schemas.category import (
    CategoryCountResponse,
    CategoryCreateRequest,
    CategoryOrderRequest,
    CategoryResponse,
    CategoryUpdateRequest,
)

router = APIRouter()

CategoryManager = Annotated[UserResult, Depends(require_permission("category", "manage"))]


@router.get("/count", response_model=CategoryCountResponse)
async def count_categories(
    _: Annotated[UserResult, Depends(require_permission("report", "read"))],
    admin_svc: CategoryAdminService = Depends(get_category_admin_service),
):
    """Number of active categories."""
    return CategoryCountResponse(total=await admin_svc.count())


@router.post("", response_model=CategoryResponse, status_code=201)
@limit_writes
async def create_category(
    request: Request,
    body: CategoryCreateRequest,
    current_user: CategoryManager,
    admin_svc: CategoryAdminService = Depends(get_category_admin_service),
):
    """Create a category; its level follows from the parent."""
    created = await admin_svc.create(**body.model_dump(), created_by=current_user.id)
    return CategoryResponse.from_result(created)


@router.patch("/{category_id}", response_model=CategoryResponse)
@limit_writes
async def update_category(
    request: Request,
    category_id: int,
    body: CategoryUpdateRequest,
    current_user: CategoryManager,
    admin_svc: CategoryAdminService = Depends(get_category_admin_service),
):
    """Partial update. Only fields present in the body change; parent_id: null moves to the root."""
    updated = await admin_svc.update(
        category_id,
        body.model_dump(exclude_unset=True),
        updated_by=current_user.id,
    )
    return CategoryResponse.from_result(updated)


@router.patch("/{category_id}/order", response_model=CategoryResponse)
@limit_writes
async def update_category_order(
    request: Request,
    category_id: int,
    body: CategoryOrderRequest,
    current_user: CategoryManager,
    admin_svc: CategoryAdminService = Depends(get_category_admin_service),
):
    updated = await admin_svc.update_order(category_id, body.order, updated_by=current_user.id)
    return CategoryResponse.from_result(updated)


@router.delete("/{category_id}", response_model=CategoryResponse)
@limit_writes
async def delete_category(
    request: Request,
    category_id: int,
    current_user: CategoryManager,
    admin_svc: CategoryAdminService = Depends(get_category_admin_service),
):
    """Soft delete. 409 while the category has active children or documents."""
    deleted = await admin_svc.delete(category_id, deleted_by=current_user.id)
    return CategoryResponse.from_result(deleted)
