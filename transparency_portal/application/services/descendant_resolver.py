"""Descendant resolver: transitive closure of active categories, memoized per starting id."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from transparency_portal.application.interfaces.repositories import ICategoryRepository
from transparency_portal.application.interfaces.services import ICacheService
from transparency_portal.core.cache_keys import descendants_key

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300


class DescendantResolver:
    """Resolve a category id (or several) to itself plus every active descendant.

    Each starting id is cached under its own key with exactly its own
    closure, so a batch lookup equals the union of single lookups whether or
    not the cache is warm. Pass cache=None to disable memoization.
    """

    def __init__(
        self,
        category_repo: ICategoryRepository,
        cache: ICacheService | None = None,
        ttl: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        self.category_repo = category_repo
        self.cache = cache
        self.ttl = ttl

    def _cache_enabled(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    async def resolve(self, category_id: int) -> set[int]:
        """Descendant closure of one category (empty when it is missing or inactive)."""
        return await self.resolve_many([category_id])

    async def resolve_many(self, category_ids: Iterable[int]) -> set[int]:
        """Union of the closures of every id; empty input gives an empty set."""
        seeds = set(category_ids)
        if not seeds:
            return set()

        resolved: set[int] = set()
        missing: set[int] = set()
        if self._cache_enabled():
            assert self.cache is not None
            for seed in seeds:
                cached = await self.cache.get(descendants_key(seed))
                if cached is None:
                    missing.add(seed)
                else:
                    resolved.update(cached)
        else:
            missing = seeds

        if missing:
            closure = await self.category_repo.get_descendant_map(missing)
            for seed in missing:
                ids = closure.get(seed, set())
                resolved.update(ids)
                if self._cache_enabled():
                    assert self.cache is not None
                    await self.cache.set(descendants_key(seed), sorted(ids), ttl=self.ttl)
            logger.debug(
                "Resolved descendants for %d uncached categories (%d cached)",
                len(missing),
                len(seeds) - len(missing),
            )
        return resolved
