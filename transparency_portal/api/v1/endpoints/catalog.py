"""Public catalog API: roots, children, paths, trees and name search.

Read-only and unauthenticated. Categories that accept documents carry
their per-type document availability.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from transparency_portal.api.v1.dependencies import (
    get_availability_service,
    get_catalog_tree_service,
)
from transparency_portal.application.services import DocumentAvailabilityService
from transparency_portal.application.use_cases.catalog import CatalogTreeService
from transparency_portal.schemas.category import (
    CategoryPathItemResponse,
    CategoryResponse,
    CategorySearchResultResponse,
    CategoryTreeNodeResponse,
    CategoryWithChildrenResponse,
)

router = APIRouter()

TreeService = Annotated[CatalogTreeService, Depends(get_catalog_tree_service)]
Availability = Annotated[DocumentAvailabilityService, Depends(get_availability_service)]


@router.get("/roots", response_model=list[CategoryResponse])
async def list_roots(tree_svc: TreeService, availability_svc: Availability):
    """Active root categories ordered by (order, name)."""
    roots = await tree_svc.get_roots()
    availability = await availability_svc.get_availability(roots)
    return [CategoryResponse.from_result(c, availability) for c in roots]


@router.get("/tree", response_model=list[CategoryTreeNodeResponse])
async def get_tree(
    tree_svc: TreeService,
    root_id: int | None = Query(None, ge=1),
):
    """Nested tree of active categories; the whole forest when root_id is omitted."""
    nodes = await tree_svc.get_tree(root_id)
    return [CategoryTreeNodeResponse.from_node(n) for n in nodes]


@router.get("/search", response_model=list[CategorySearchResultResponse])
async def search_categories(
    tree_svc: TreeService,
    availability_svc: Availability,
    q: str = Query(..., description="Name substring, at least 2 characters"),
):
    """Categories whose name contains q, each with its path from the root."""
    matches = await tree_svc.search_with_paths(q)
    availability = await availability_svc.get_availability(m.category for m in matches)
    return [CategorySearchResultResponse.from_match(m, availability) for m in matches]


@router.get("/{category_id}", response_model=CategoryWithChildrenResponse)
async def get_category(
    category_id: int,
    tree_svc: TreeService,
    availability_svc: Availability,
):
    """Category with its active children; availability for both."""
    category, children = await tree_svc.get_with_children(category_id)
    availability = await availability_svc.get_availability([category, *children])
    response = CategoryWithChildrenResponse.from_result(category, availability)
    response.children = [CategoryResponse.from_result(c, availability) for c in children]
    return response


@router.get("/{category_id}/children", response_model=list[CategoryResponse])
async def list_children(
    category_id: int,
    tree_svc: TreeService,
    availability_svc: Availability,
):
    children = await tree_svc.get_children(category_id)
    availability = await availability_svc.get_availability(children)
    return [CategoryResponse.from_result(c, availability) for c in children]


@router.get("/{category_id}/path", response_model=list[CategoryPathItemResponse])
async def get_path(category_id: int, tree_svc: TreeService):
    """Breadcrumb from the root down to the category."""
    await tree_svc.get_category(category_id)
    path = await tree_svc.get_ancestor_path(category_id)
    return [CategoryPathItemResponse.model_validate(p) for p in path]
