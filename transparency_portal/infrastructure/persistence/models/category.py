"""Category ORM model. Node of the catalog hierarchy (self-referencing parent_id)."""

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from transparency_portal.infrastructure.persistence.database import Base
from transparency_portal.infrastructure.persistence.models.mixins import (
    ActiveFlagMixin,
    IntegerPkMixin,
    UserAuditMixin,
)


class Category(IntegerPkMixin, ActiveFlagMixin, UserAuditMixin, Base):
    """Catalog category. Table: category. level is 0 for roots, parent.level + 1 otherwise."""

    __tablename__ = "category"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    level_description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    order: Mapped[int] = mapped_column(
        "sort_order", Integer, nullable=False, default=0
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    accepts_documents: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("category.id", ondelete="RESTRICT"), nullable=True
    )

    __table_args__ = (
        Index("ix_category_parent_active", "parent_id", "is_active"),
        Index("ix_category_level", "level"),
    )
