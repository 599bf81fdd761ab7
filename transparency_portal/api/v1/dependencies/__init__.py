"""Presentation-layer dependency injection (composition root).

Routes depend only on these providers; repositories and services are
built here from infrastructure implementations.
"""

from .auth import (
    get_authorization_service,
    get_current_user,
    get_current_user_optional,
    get_permission_resolver,
    get_user_repo,
    require_permission,
)
from .catalog import (
    get_availability_service,
    get_catalog_tree_service,
    get_category_admin_service,
    get_category_repo,
    get_descendant_resolver,
    get_document_repo,
    get_document_type_repo,
)
from .common import get_cache, get_storage_service
from .documents import (
    get_document_query_service,
    get_document_search_service,
    get_document_upload_service,
)
from .users import get_user_admin_service

__all__ = [
    "get_authorization_service",
    "get_availability_service",
    "get_cache",
    "get_catalog_tree_service",
    "get_category_admin_service",
    "get_category_repo",
    "get_current_user",
    "get_current_user_optional",
    "get_descendant_resolver",
    "get_document_query_service",
    "get_document_repo",
    "get_document_search_service",
    "get_document_type_repo",
    "get_document_upload_service",
    "get_permission_resolver",
    "get_storage_service",
    "get_user_admin_service",
    "get_user_repo",
    "require_permission",
]
