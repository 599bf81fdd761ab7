"""Document ORM model. Metadata for a file stored through the storage service."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from transparency_portal.infrastructure.persistence.database import Base
from transparency_portal.infrastructure.persistence.models.mixins import (
    ActiveFlagMixin,
    IntegerPkMixin,
    UserAuditMixin,
)
from transparency_portal.shared.utils.datetime import utc_now


class Document(IntegerPkMixin, ActiveFlagMixin, UserAuditMixin, Base):
    """Published document. Table: document. Owned by exactly one category."""

    __tablename__ = "document"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("category.id", ondelete="RESTRICT"), nullable=False
    )
    document_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("document_type.id", ondelete="SET NULL"), nullable=True
    )
    fiscal_year: Mapped[int] = mapped_column(Integer, nullable=False)
    periodicity: Mapped[str | None] = mapped_column(String(20), nullable=True)
    issuing_institution: Mapped[str | None] = mapped_column(String(255), nullable=True)
    storage_path: Mapped[str] = mapped_column(String(500), nullable=False)
    original_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    extension: Mapped[str] = mapped_column(String(20), nullable=False)
    content_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    checksum: Mapped[str | None] = mapped_column(String(64), nullable=True)
    publication_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    __table_args__ = (
        Index("ix_document_category_active", "category_id", "is_active"),
        Index("ix_document_document_type_id", "document_type_id"),
        Index("ix_document_fiscal_year", "fiscal_year"),
        Index("ix_document_created_at", "created_at"),
    )
