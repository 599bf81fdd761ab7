"""Repository interfaces (ports) for the application layer.

All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from transparency_portal.application.dtos.category import CategoryResult
    from transparency_portal.application.dtos.document import (
        DocumentCreate,
        DocumentFilter,
        DocumentResult,
    )
    from transparency_portal.application.dtos.document_type import DocumentTypeResult
    from transparency_portal.application.dtos.user import RoleResult, UserResult


class ICategoryRepository(Protocol):
    """Catalog tree store."""

    async def get_by_id(self, category_id: int) -> CategoryResult | None:
        """Return the category regardless of its active flag."""

    async def get_active(self, category_id: int) -> CategoryResult | None:
        """Return the category only when active."""

    async def get_roots(self) -> list[CategoryResult]:
        """Active categories with no parent, ordered by (order, name)."""

    async def get_children(self, parent_id: int) -> list[CategoryResult]:
        """Active children of parent_id, ordered by (order, name)."""

    async def get_children_any(self, parent_id: int) -> list[CategoryResult]:
        """Direct children whatever their active flag."""

    async def get_all_active(self) -> list[CategoryResult]:
        """Every active category, ordered by (level, order, name)."""

    async def search_by_name(self, term: str) -> list[CategoryResult]:
        """Active categories whose name contains term (case-insensitive)."""

    async def get_for_filters(self) -> list[CategoryResult]:
        """Active categories of level 0 or 1 that accept documents, ordered by order."""

    async def count_active(self) -> int:
        """Number of active categories."""

    async def count_active_children(self, category_id: int) -> int:
        """Number of active direct children."""

    async def get_descendant_map(
        self, seed_ids: Iterable[int]
    ) -> dict[int, set[int]]:
        """For each seed id, the seed plus all active transitive descendants."""

    async def create_category(self, **fields: Any) -> CategoryResult:
        """Insert a category."""

    async def update_category(self, category_id: int, **fields: Any) -> CategoryResult:
        """Apply field changes; raises ResourceNotFoundException when missing."""

    async def set_levels(self, levels: dict[int, int]) -> None:
        """Bulk update level per category id."""


class IDocumentTypeRepository(Protocol):
    async def get_active(self, document_type_id: int) -> DocumentTypeResult | None:
        """Return the type only when active."""

    async def list_active(self) -> list[DocumentTypeResult]:
        """Active types in load order (ordered by name)."""


class IDocumentRepository(Protocol):
    """Document metadata store."""

    async def get_by_id(self, document_id: int) -> DocumentResult | None:
        """Return the document regardless of its active flag."""

    async def get_active(self, document_id: int) -> DocumentResult | None:
        """Return the document only when active."""

    async def list_active_for_categories(
        self, category_ids: Iterable[int]
    ) -> list[DocumentResult]:
        """Active documents of the categories, newest first (created_at desc, id desc)."""

    async def list_by_category(self, category_id: int) -> list[DocumentResult]:
        """Active documents of one category, newest first."""

    async def count_active_in_category(self, category_id: int) -> int:
        """Number of active documents owned by the category."""

    async def search(
        self,
        filters: DocumentFilter,
        *,
        offset: int,
        limit: int,
        order_by: str,
        descending: bool,
    ) -> list[DocumentResult]:
        """One page of active documents matching filters."""

    async def count(self, filters: DocumentFilter) -> int:
        """Total active documents matching filters."""

    async def search_by_name(self, term: str) -> list[DocumentResult]:
        """Active documents whose name contains term."""

    async def list_recent(self, limit: int) -> list[DocumentResult]:
        """Most recently published active documents."""

    async def distinct_fiscal_years(self) -> list[int]:
        """Distinct fiscal years of active documents, newest first."""

    async def distinct_extensions(self) -> list[str]:
        """Distinct extensions of active documents, sorted."""

    async def distinct_institutions(self) -> list[str]:
        """Distinct non-empty issuing institutions of active documents, sorted."""

    async def count_by_fiscal_year(self, category_id: int | None = None) -> dict[int, int]:
        """Active document counts per fiscal year (optionally for one category)."""

    async def count_by_extension(self) -> dict[str, int]:
        """Active document counts per extension."""

    async def count_active(self, category_id: int | None = None) -> int:
        """Active document count (optionally for one category)."""

    async def create_document(self, data: DocumentCreate) -> DocumentResult:
        """Insert document metadata."""

    async def update_document(self, document_id: int, **fields: Any) -> DocumentResult:
        """Apply field changes; raises ResourceNotFoundException when missing."""


class IUserRepository(Protocol):
    async def get_by_id(self, user_id: int) -> UserResult | None:
        """Return user by id."""

    async def get_by_username(self, username: str) -> UserResult | None:
        """Return user by username."""

    async def authenticate(self, username: str, password: str) -> UserResult | None:
        """Return the user when active and the password matches, else None."""

    async def get_by_email(self, email: str) -> UserResult | None:
        """Return user by email, compared case-insensitively."""

    async def create_user(
        self,
        username: str,
        email: str,
        password: str,
        full_name: str | None = None,
        is_active: bool = True,
    ) -> UserResult:
        """Hash the password and insert the user."""

    async def update_user(self, user_id: int, **fields: Any) -> UserResult:
        """Apply field changes; raises ResourceNotFoundException when missing."""

    async def set_password(self, user_id: int, password: str) -> None:
        """Replace the stored password hash."""

    async def list_users(
        self,
        *,
        term: str | None = None,
        is_active: bool | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[UserResult]:
        """Newest first, optionally filtered by a search term and active flag."""

    async def count_users(
        self, *, term: str | None = None, is_active: bool | None = None
    ) -> int:
        """Number of users matching the same filters as list_users."""

    async def list_by_role(self, role_id: int) -> list[UserResult]:
        """Users holding role_id, ordered by username."""


class IRoleRepository(Protocol):
    async def get_role(self, role_id: int) -> RoleResult | None:
        """Return the role regardless of its active flag."""

    async def list_roles(self, is_active: bool | None = None) -> list[RoleResult]:
        """Roles ordered by name."""

    async def get_roles(self, role_ids: Iterable[int]) -> list[RoleResult]:
        """Roles among the given ids, in no particular order."""

    async def get_roles_for_users(
        self, user_ids: Iterable[int]
    ) -> dict[int, list[RoleResult]]:
        """Assigned roles per user, ordered by code."""

    async def set_user_roles(self, user_id: int, role_ids: Iterable[int]) -> None:
        """Replace the user's role assignments with role_ids."""
