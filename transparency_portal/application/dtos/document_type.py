"""DTOs for document types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DocumentTypeResult:
    id: int
    name: str
    extensions: str
    is_active: bool

    @property
    def primary_extension(self) -> str:
        """First token of the extension list, lowercased; the lowercased name when the list is empty."""
        first = self.extensions.split(",")[0].strip() if self.extensions else ""
        return first.lower() if first else self.name.lower()
