"""DTOs for the catalog hierarchy (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class CategoryResult:
    """Category read-model."""

    id: int
    name: str
    description: str | None
    level_description: str | None
    icon: str | None
    order: int
    level: int
    accepts_documents: bool
    parent_id: int | None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class CategoryPathItem:
    """One hop of an ancestor path (root first)."""

    id: int
    name: str
    level: int


@dataclass(frozen=True)
class CategoryTreeNode:
    """Nested tree node; children keep (order, name) ordering."""

    category: CategoryResult
    children: tuple[CategoryTreeNode, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CategorySearchMatch:
    """A name-search hit with its path from the root."""

    category: CategoryResult
    path: tuple[CategoryPathItem, ...]
