"""Base repository: generic CRUD and lifecycle hooks (cache invalidation)."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from transparency_portal.domain.exceptions import ResourceNotFoundException
from transparency_portal.infrastructure.persistence.database import Base


class BaseRepository[ModelType: Base]:
    """Base repository with row lookup, create, update and lifecycle hooks.

    Subclasses override _on_after_create and _on_after_update
    for cache invalidation and map ORM rows to application DTOs.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _get_row(self, entity_id: int) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def _require_row(self, entity_id: int) -> ModelType:
        row = await self._get_row(entity_id)
        if row is None:
            raise ResourceNotFoundException(self.model.__tablename__, entity_id)
        return row

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and run _on_after_create hook."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def update(self, obj: ModelType, **fields: Any) -> ModelType:
        """Set attributes on an attached record, flush and run _on_after_update hook."""
        for name, value in fields.items():
            if not hasattr(obj, name):
                raise ValueError(f"{self.model.__name__} has no field {name!r}")
            setattr(obj, name, value)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_update(obj)
        return obj

    async def _on_after_create(self, obj: ModelType) -> None:
        """Override in subclasses to invalidate caches."""

    async def _on_after_update(self, obj: ModelType) -> None:
        """Override in subclasses to invalidate caches."""
