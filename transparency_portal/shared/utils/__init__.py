"""Shared utilities: datetime and text sanitization."""

from transparency_portal.shared.utils.datetime import (
    current_fiscal_year,
    ensure_utc,
    utc_now,
)
from transparency_portal.shared.utils.sanitization import (
    sanitize_filename,
    sanitize_text,
)

__all__ = [
    "utc_now",
    "ensure_utc",
    "current_fiscal_year",
    "sanitize_text",
    "sanitize_filename",
]
