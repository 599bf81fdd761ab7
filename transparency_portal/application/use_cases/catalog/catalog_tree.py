"""Catalog navigation: roots, children, ancestor paths, nested trees and name search.

Read paths only see active categories; an inactive category is reported
as not found.
"""

from __future__ import annotations

import logging

from transparency_portal.application.dtos.category import (
    CategoryPathItem,
    CategoryResult,
    CategorySearchMatch,
    CategoryTreeNode,
)
from transparency_portal.application.interfaces.repositories import ICategoryRepository
from transparency_portal.core.constants import (
    MAX_CATEGORY_DEPTH,
    MIN_SEARCH_TERM_LENGTH,
)
from transparency_portal.domain.exceptions import (
    ResourceNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)


def _sort_key(c: CategoryResult) -> tuple[int, str]:
    return (c.order, c.name)


class CatalogTreeService:
    """Structural queries over the category tree."""

    def __init__(
        self,
        category_repo: ICategoryRepository,
        max_depth: int = MAX_CATEGORY_DEPTH,
    ) -> None:
        self.category_repo = category_repo
        self.max_depth = max_depth

    async def get_category(self, category_id: int) -> CategoryResult:
        """Return an active category or raise ResourceNotFoundException."""
        category = await self.category_repo.get_active(category_id)
        if category is None:
            raise ResourceNotFoundException("category", category_id)
        return category

    async def get_roots(self) -> list[CategoryResult]:
        """Active root categories ordered by (order, name)."""
        return await self.category_repo.get_roots()

    async def get_children(self, category_id: int) -> list[CategoryResult]:
        """Active children ordered by (order, name); the parent itself must be active."""
        await self.get_category(category_id)
        return await self.category_repo.get_children(category_id)

    async def get_with_children(
        self, category_id: int
    ) -> tuple[CategoryResult, list[CategoryResult]]:
        category = await self.get_category(category_id)
        return category, await self.category_repo.get_children(category_id)

    async def get_ancestor_path(self, category_id: int) -> list[CategoryPathItem]:
        """Path root -> target by walking parent_id upward.

        Stops quietly at a missing or inactive link, or after max_depth hops,
        returning the partial path gathered so far (still root-most first).
        """
        path: list[CategoryPathItem] = []
        seen: set[int] = set()
        current_id: int | None = category_id
        hops = 0
        while current_id is not None and hops <= self.max_depth:
            if current_id in seen:
                logger.warning("Cycle detected in category path at %s", current_id)
                break
            category = await self.category_repo.get_active(current_id)
            if category is None:
                break
            seen.add(current_id)
            path.append(
                CategoryPathItem(id=category.id, name=category.name, level=category.level)
            )
            current_id = category.parent_id
            hops += 1
        path.reverse()
        return path

    async def get_tree(self, root_id: int | None = None) -> list[CategoryTreeNode]:
        """Nested tree of active categories.

        With root_id, returns a single-element list rooted at that category;
        otherwise the forest of all roots. Depth is capped at max_depth.
        """
        categories = await self.category_repo.get_all_active()
        children_of: dict[int | None, list[CategoryResult]] = {}
        for category in categories:
            children_of.setdefault(category.parent_id, []).append(category)
        for siblings in children_of.values():
            siblings.sort(key=_sort_key)

        def build(category: CategoryResult, depth: int) -> CategoryTreeNode:
            if depth >= self.max_depth:
                return CategoryTreeNode(category=category)
            return CategoryTreeNode(
                category=category,
                children=tuple(
                    build(child, depth + 1) for child in children_of.get(category.id, [])
                ),
            )

        if root_id is not None:
            root = await self.get_category(root_id)
            return [build(root, 0)]
        return [build(root, 0) for root in children_of.get(None, [])]

    async def search_with_paths(self, term: str) -> list[CategorySearchMatch]:
        """Active categories whose name contains term, each with its ancestor path.

        Raises:
            ValidationException: trimmed term shorter than 2 characters.
        """
        cleaned = (term or "").strip()
        if len(cleaned) < MIN_SEARCH_TERM_LENGTH:
            raise ValidationException(
                f"Search term must have at least {MIN_SEARCH_TERM_LENGTH} characters",
                field="q",
            )
        matches = await self.category_repo.search_by_name(cleaned)
        return [
            CategorySearchMatch(
                category=category,
                path=tuple(await self.get_ancestor_path(category.id)),
            )
            for category in matches
        ]
