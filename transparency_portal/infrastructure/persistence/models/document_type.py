"""DocumentType ORM model. Static reference data (CSV, JSON, XML, Excel...)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from transparency_portal.infrastructure.persistence.database import Base
from transparency_portal.infrastructure.persistence.models.mixins import (
    ActiveFlagMixin,
    IntegerPkMixin,
    TimestampMixin,
)


class DocumentType(IntegerPkMixin, ActiveFlagMixin, TimestampMixin, Base):
    """Declared file-format class. extensions is a comma-separated list (e.g. 'xlsx,xls')."""

    __tablename__ = "document_type"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    extensions: Mapped[str] = mapped_column(String(255), nullable=False, default="")
