"""Role ORM model (admin, uploader, editor)."""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from transparency_portal.infrastructure.persistence.database import Base
from transparency_portal.infrastructure.persistence.models.mixins import (
    IntegerPkMixin,
    TimestampMixin,
)


class Role(IntegerPkMixin, TimestampMixin, Base):
    """Role. Table: role. Unique code."""

    __tablename__ = "role"

    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
