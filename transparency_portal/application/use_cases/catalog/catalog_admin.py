"""Catalog administration: create, update (with reparent), reorder and soft delete.

Keeps level == parent.level + 1 (0 for roots) for every category after
each mutation, including the whole subtree of a moved category.
"""

from __future__ import annotations

import logging
from typing import Any

from transparency_portal.application.dtos.category import CategoryResult
from transparency_portal.application.interfaces.repositories import (
    ICategoryRepository,
    IDocumentRepository,
)
from transparency_portal.core.constants import MAX_CATEGORY_DEPTH
from transparency_portal.domain.exceptions import (
    CategoryCycleException,
    CategoryHasChildrenException,
    CategoryHasDocumentsException,
    ResourceNotFoundException,
    ValidationException,
)
from transparency_portal.shared.utils.sanitization import sanitize_text

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("name", "description", "level_description", "icon")
_REQUIRED_FIELDS = ("name", "order", "accepts_documents", "is_active")
_UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "description",
        "level_description",
        "icon",
        "order",
        "accepts_documents",
        "is_active",
        "parent_id",
    }
)


class CategoryAdminService:
    """Mutations on the category tree. Callers run these inside a transaction."""

    def __init__(
        self,
        category_repo: ICategoryRepository,
        document_repo: IDocumentRepository,
    ) -> None:
        self.category_repo = category_repo
        self.document_repo = document_repo

    async def _level_under(self, parent_id: int | None) -> int:
        """Level for a node placed under parent_id; the parent must be active."""
        if parent_id is None:
            return 0
        parent = await self.category_repo.get_active(parent_id)
        if parent is None:
            raise ResourceNotFoundException("category", parent_id)
        if parent.level + 1 > MAX_CATEGORY_DEPTH:
            raise ValidationException(
                f"Category tree cannot be deeper than {MAX_CATEGORY_DEPTH} levels",
                field="parent_id",
            )
        return parent.level + 1

    @staticmethod
    def _clean(fields: dict[str, Any]) -> dict[str, Any]:
        cleaned = dict(fields)
        for name in _REQUIRED_FIELDS:
            if name in cleaned and cleaned[name] is None:
                raise ValidationException(f"Category {name} cannot be null", field=name)
        for name in _TEXT_FIELDS:
            if name in cleaned and cleaned[name] is not None:
                cleaned[name] = sanitize_text(cleaned[name])
        if "name" in cleaned and not cleaned["name"]:
            raise ValidationException("Category name is required", field="name")
        return cleaned

    async def create(
        self,
        *,
        name: str,
        description: str | None = None,
        level_description: str | None = None,
        icon: str | None = None,
        parent_id: int | None = None,
        order: int = 0,
        accepts_documents: bool = False,
        is_active: bool = True,
        created_by: int | None = None,
    ) -> CategoryResult:
        fields = self._clean(
            {
                "name": name,
                "description": description,
                "level_description": level_description,
                "icon": icon,
            }
        )
        level = await self._level_under(parent_id)
        category = await self.category_repo.create_category(
            **fields,
            parent_id=parent_id,
            level=level,
            order=order,
            accepts_documents=accepts_documents,
            is_active=is_active,
            created_by=created_by,
            updated_by=created_by,
        )
        logger.info("Created category %s (level %s)", category.id, level)
        return category

    async def update(
        self,
        category_id: int,
        changes: dict[str, Any],
        updated_by: int | None = None,
    ) -> CategoryResult:
        """Apply a partial update. changes holds only the fields the caller set.

        parent_id present with None moves the category to the root. A move
        recomputes the level of the category and all of its descendants.

        Raises:
            ResourceNotFoundException: category missing, or new parent missing/inactive.
            CategoryCycleException: new parent is the category or one of its descendants.
        """
        current = await self.category_repo.get_by_id(category_id)
        if current is None:
            raise ResourceNotFoundException("category", category_id)
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Unknown category fields: {', '.join(sorted(unknown))}"
            )
        fields = self._clean(changes)

        if fields.get("is_active") is False and current.is_active:
            await self._ensure_deletable(category_id)

        reparent = "parent_id" in fields and fields["parent_id"] != current.parent_id
        if reparent:
            new_parent_id = fields["parent_id"]
            if new_parent_id is not None and await self._is_in_subtree(
                new_parent_id, category_id
            ):
                raise CategoryCycleException(category_id, new_parent_id)
            fields["level"] = await self._level_under(new_parent_id)

        updated = await self.category_repo.update_category(
            category_id, **fields, updated_by=updated_by
        )
        if reparent and updated.level != current.level:
            await self._relevel_subtree(updated)
        return updated

    async def _is_in_subtree(self, candidate_id: int, root_id: int) -> bool:
        """True if candidate_id is root_id or lies below it (any activity state)."""
        current_id: int | None = candidate_id
        for _ in range(MAX_CATEGORY_DEPTH + 1):
            if current_id is None:
                return False
            if current_id == root_id:
                return True
            node = await self.category_repo.get_by_id(current_id)
            current_id = node.parent_id if node else None
        return False

    async def _relevel_subtree(self, root: CategoryResult) -> None:
        """Recompute levels below root breadth-first, inactive children included."""
        levels: dict[int, int] = {root.id: root.level}
        frontier = [root.id]
        for _ in range(MAX_CATEGORY_DEPTH):
            if not frontier:
                break
            next_frontier: list[int] = []
            for node_id in frontier:
                for child in await self.category_repo.get_children_any(node_id):
                    if child.id in levels:
                        continue
                    levels[child.id] = levels[node_id] + 1
                    next_frontier.append(child.id)
            frontier = next_frontier
        del levels[root.id]
        if levels:
            await self.category_repo.set_levels(levels)
            logger.info("Re-leveled %d descendants of category %s", len(levels), root.id)

    async def _ensure_deletable(self, category_id: int) -> None:
        child_count = await self.category_repo.count_active_children(category_id)
        if child_count:
            raise CategoryHasChildrenException(category_id, child_count)
        document_count = await self.document_repo.count_active_in_category(category_id)
        if document_count:
            raise CategoryHasDocumentsException(category_id, document_count)

    async def update_order(
        self, category_id: int, order: int, updated_by: int | None = None
    ) -> CategoryResult:
        return await self.update(category_id, {"order": order}, updated_by=updated_by)

    async def delete(self, category_id: int, deleted_by: int | None = None) -> CategoryResult:
        """Soft delete (is_active=False).

        Raises:
            ResourceNotFoundException: category missing or already inactive.
            CategoryHasChildrenException: active subcategories exist.
            CategoryHasDocumentsException: active documents exist.
        """
        category = await self.category_repo.get_active(category_id)
        if category is None:
            raise ResourceNotFoundException("category", category_id)
        await self._ensure_deletable(category_id)
        result = await self.category_repo.update_category(
            category_id, is_active=False, updated_by=deleted_by
        )
        logger.info("Soft-deleted category %s", category_id)
        return result

    async def count(self) -> int:
        return await self.category_repo.count_active()
