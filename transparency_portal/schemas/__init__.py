"""Pydantic request/response schemas for the API."""

from transparency_portal.schemas.auth import CurrentUserResponse, LoginRequest, TokenResponse
from transparency_portal.schemas.category import (
    CategoryCreateRequest,
    CategoryResponse,
    CategoryUpdateRequest,
)
from transparency_portal.schemas.document import DocumentResponse
from transparency_portal.schemas.document_type import DocumentTypeResponse
from transparency_portal.schemas.health import HealthResponse
from transparency_portal.schemas.search import DocumentSearchResponse
from transparency_portal.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest

__all__ = [
    "CategoryCreateRequest",
    "CategoryResponse",
    "CategoryUpdateRequest",
    "CurrentUserResponse",
    "DocumentResponse",
    "DocumentSearchResponse",
    "DocumentTypeResponse",
    "HealthResponse",
    "LoginRequest",
    "TokenResponse",
    "UserCreateRequest",
    "UserResponse",
    "UserUpdateRequest",
]
