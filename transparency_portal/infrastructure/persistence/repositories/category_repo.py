"""Category repository: catalog tree store and recursive descendant query.

Returns application DTOs. Structural changes (create, reparent,
activation toggles) invalidate the cached descendant closures.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from transparency_portal.application.dtos.category import CategoryResult
from transparency_portal.core.cache_keys import descendants_pattern
from transparency_portal.infrastructure.persistence.database import after_commit
from transparency_portal.infrastructure.persistence.models.category import Category
from transparency_portal.infrastructure.persistence.repositories.base import (
    BaseRepository,
)
from transparency_portal.shared.utils.datetime import ensure_utc

if TYPE_CHECKING:
    from transparency_portal.application.interfaces.services import ICacheService

_STRUCTURAL_FIELDS = frozenset({"parent_id", "is_active"})


def _to_result(c: Category) -> CategoryResult:
    """Map ORM Category to CategoryResult."""
    return CategoryResult(
        id=c.id,
        name=c.name,
        description=c.description,
        level_description=c.level_description,
        icon=c.icon,
        order=c.order,
        level=c.level,
        accepts_documents=c.accepts_documents,
        parent_id=c.parent_id,
        is_active=c.is_active,
        created_at=ensure_utc(c.created_at),
        updated_at=ensure_utc(c.updated_at),
    )


class CategoryRepository(BaseRepository[Category]):
    """Catalog categories. Read paths other than get_by_id see active rows only."""

    def __init__(
        self, db: AsyncSession, cache_service: ICacheService | None = None
    ) -> None:
        super().__init__(db, Category)
        self.cache = cache_service

    def _active(self):
        return select(Category).where(Category.is_active.is_(True))

    async def _list(self, stmt: Any) -> list[CategoryResult]:
        result = await self.db.execute(stmt)
        return [_to_result(c) for c in result.scalars().all()]

    async def get_by_id(self, category_id: int) -> CategoryResult | None:
        row = await self._get_row(category_id)
        return _to_result(row) if row else None

    async def get_active(self, category_id: int) -> CategoryResult | None:
        result = await self.db.execute(
            self._active().where(Category.id == category_id)
        )
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def get_roots(self) -> list[CategoryResult]:
        return await self._list(
            self._active()
            .where(Category.parent_id.is_(None))
            .order_by(Category.order.asc(), Category.name.asc())
        )

    async def get_children(self, parent_id: int) -> list[CategoryResult]:
        return await self._list(
            self._active()
            .where(Category.parent_id == parent_id)
            .order_by(Category.order.asc(), Category.name.asc())
        )

    async def get_children_any(self, parent_id: int) -> list[CategoryResult]:
        """Direct children regardless of active flag (used to re-level a moved subtree)."""
        return await self._list(
            select(Category)
            .where(Category.parent_id == parent_id)
            .order_by(Category.order.asc(), Category.name.asc())
        )

    async def get_all_active(self) -> list[CategoryResult]:
        return await self._list(
            self._active().order_by(
                Category.level.asc(), Category.order.asc(), Category.name.asc()
            )
        )

    async def search_by_name(self, term: str) -> list[CategoryResult]:
        pattern = f"%{term.lower()}%"
        return await self._list(
            self._active()
            .where(func.lower(Category.name).like(pattern))
            .order_by(Category.level.asc(), Category.order.asc(), Category.name.asc())
        )

    async def get_for_filters(self) -> list[CategoryResult]:
        return await self._list(
            self._active()
            .where(
                Category.level.in_((0, 1)),
                Category.accepts_documents.is_(True),
            )
            .order_by(Category.order.asc(), Category.name.asc())
        )

    async def count_active(self) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Category).where(Category.is_active.is_(True))
        )
        return int(result.scalar_one())

    async def count_active_children(self, category_id: int) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(Category)
            .where(Category.parent_id == category_id, Category.is_active.is_(True))
        )
        return int(result.scalar_one())

    async def get_descendant_map(self, seed_ids: Iterable[int]) -> dict[int, set[int]]:
        """Transitive closure per seed via one recursive CTE.

        Each row carries the seed it was reached from, so overlapping
        subtrees are attributed to every seed that reaches them. Only active
        nodes are followed; an inactive or missing seed maps to an empty set.
        """
        seeds = set(seed_ids)
        closure: dict[int, set[int]] = {seed: set() for seed in seeds}
        if not seeds:
            return closure
        anchor = select(
            Category.id.label("seed_id"), Category.id.label("category_id")
        ).where(Category.id.in_(seeds), Category.is_active.is_(True))
        tree = anchor.cte(name="category_descendants", recursive=True)
        child = aliased(Category)
        # UNION (not UNION ALL) stops on a repeated (seed, node) pair, so corrupt
        # cyclic data cannot loop forever
        tree = tree.union(
            select(tree.c.seed_id, child.id)
            .join(child, child.parent_id == tree.c.category_id)
            .where(child.is_active.is_(True))
        )
        result = await self.db.execute(select(tree.c.seed_id, tree.c.category_id))
        for seed_id, category_id in result.all():
            closure[seed_id].add(category_id)
        return closure

    async def create_category(self, **fields: Any) -> CategoryResult:
        row = await self.create(Category(**fields))
        return _to_result(row)

    async def update_category(self, category_id: int, **fields: Any) -> CategoryResult:
        row = await self._require_row(category_id)
        row = await self.update(row, **fields)
        if _STRUCTURAL_FIELDS.intersection(fields):
            await self._invalidate_descendants()
        return _to_result(row)

    async def set_levels(self, levels: dict[int, int]) -> None:
        for category_id, level in levels.items():
            await self.db.execute(
                update(Category).where(Category.id == category_id).values(level=level)
            )
        await self.db.flush()

    async def _on_after_create(self, obj: Category) -> None:
        if obj.parent_id is not None:
            await self._invalidate_descendants()

    async def _invalidate_descendants(self) -> None:
        """Any cached closure may include the changed node's ancestors; drop them all.

        Dropped again after commit so a search that ran mid-transaction
        cannot leave the old closure cached.
        """
        await self._drop_cached_closures()
        after_commit(self.db, self._drop_cached_closures)

    async def _drop_cached_closures(self) -> None:
        if self.cache and self.cache.is_available():
            await self.cache.delete_pattern(descendants_pattern())
