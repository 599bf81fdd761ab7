"""API v1 router aggregation.

Public read routes sit at the top level; administrative routes live under
/admin and are gated by permissions in their own modules.
"""

from fastapi import APIRouter

from transparency_portal.api.v1.endpoints import (
    admin_categories,
    admin_documents,
    admin_users,
    auth,
    catalog,
    document_types,
    documents,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
api_router.include_router(
    document_types.router, prefix="/document-types", tags=["document-types"]
)
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
api_router.include_router(
    admin_categories.router, prefix="/admin/categories", tags=["admin-categories"]
)
api_router.include_router(
    admin_documents.router, prefix="/admin/documents", tags=["admin-documents"]
)
api_router.include_router(
    admin_users.router, prefix="/admin/users", tags=["admin-users"]
)
