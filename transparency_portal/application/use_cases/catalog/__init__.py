"""Catalog hierarchy use cases: navigation and administration."""

from transparency_portal.application.use_cases.catalog.catalog_admin import (
    CategoryAdminService,
)
from transparency_portal.application.use_cases.catalog.catalog_tree import (
    CatalogTreeService,
)

__all__ = ["CatalogTreeService", "CategoryAdminService"]
