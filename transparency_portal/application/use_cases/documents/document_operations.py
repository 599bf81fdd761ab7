"""Document operations: upload/update/delete (write) and lookups/file access (read)."""

from __future__ import annotations

import asyncio
import hashlib
import logging
import mimetypes
import uuid
from datetime import datetime
from functools import partial
from typing import Any, BinaryIO

from transparency_portal.application.dtos.category import CategoryResult
from transparency_portal.application.dtos.document import (
    CategoryDocumentStats,
    DocumentCreate,
    DocumentFile,
    DocumentResult,
    UploadedFile,
)
from transparency_portal.application.interfaces.repositories import (
    ICategoryRepository,
    IDocumentRepository,
    IDocumentTypeRepository,
)
from transparency_portal.application.interfaces.services import (
    DeferCallback,
    IStorageService,
)
from transparency_portal.core.constants import (
    CATEGORY_STORAGE_PREFIX,
    MIN_SEARCH_TERM_LENGTH,
    PERIODICITIES,
)
from transparency_portal.domain.exceptions import (
    PortalException,
    ResourceNotFoundException,
    ValidationException,
)
from transparency_portal.infrastructure.exceptions import StorageNotFoundError
from transparency_portal.shared.utils.datetime import current_fiscal_year
from transparency_portal.shared.utils.sanitization import sanitize_filename, sanitize_text

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "description",
        "category_id",
        "document_type_id",
        "fiscal_year",
        "periodicity",
        "issuing_institution",
        "publication_date",
    }
)


def _rewind_if_seekable(file_data: BinaryIO) -> None:
    """Reset file position to start if stream is seekable."""
    if getattr(file_data, "seekable", lambda: False)():
        file_data.seek(0)


def _compute_checksum_and_size_sync(file_data: BinaryIO) -> tuple[str, int]:
    """Blocking: one pass over file_data (run in a thread). Returns (hexdigest, byte_count)."""
    sha256 = hashlib.sha256()
    total = 0
    while chunk := file_data.read(65536):
        sha256.update(chunk)
        total += len(chunk)
    _rewind_if_seekable(file_data)
    return sha256.hexdigest(), total


def _extension_of(filename: str | None) -> str:
    """Lowercased extension with its leading dot, or '' when there is none."""
    if not filename or "." not in filename:
        return ""
    return "." + filename.rsplit(".", 1)[-1].strip().lower()


def _check_periodicity(periodicity: str | None) -> None:
    if periodicity is not None and periodicity not in PERIODICITIES:
        raise ValidationException(
            f"periodicity must be one of: {', '.join(PERIODICITIES)}",
            field="periodicity",
        )


class DocumentUploadService:
    """Stores document files and keeps their metadata in step.

    Only categories that are active and accept documents can receive new
    documents; the check is not repeated if the category changes later.

    defer_until_commit, when given, queues work that must wait for the
    surrounding transaction to commit (deleting a replaced file). Without it
    that work runs immediately.
    """

    def __init__(
        self,
        storage_service: IStorageService,
        document_repo: IDocumentRepository,
        category_repo: ICategoryRepository,
        document_type_repo: IDocumentTypeRepository,
        *,
        allowed_extensions: frozenset[str],
        max_upload_size: int,
        default_institution: str | None = None,
        defer_until_commit: DeferCallback | None = None,
    ) -> None:
        self.storage = storage_service
        self.defer_until_commit = defer_until_commit
        self.document_repo = document_repo
        self.category_repo = category_repo
        self.document_type_repo = document_type_repo
        self.allowed_extensions = allowed_extensions
        self.max_upload_size = max_upload_size
        self.default_institution = default_institution

    async def _require_target_category(self, category_id: int) -> CategoryResult:
        category = await self.category_repo.get_active(category_id)
        if category is None:
            raise ResourceNotFoundException("category", category_id)
        if not category.accepts_documents:
            raise ValidationException(
                f"Category {category_id} does not accept documents",
                field="category_id",
            )
        return category

    async def _require_document_type(self, document_type_id: int | None) -> None:
        if document_type_id is None:
            return
        if await self.document_type_repo.get_active(document_type_id) is None:
            raise ResourceNotFoundException("document_type", document_type_id)

    async def _store(self, upload: UploadedFile, category_id: int) -> dict[str, Any]:
        """Validate and write the file; return the metadata fields for the document row."""
        extension = _extension_of(upload.filename)
        if extension not in self.allowed_extensions:
            raise ValidationException(
                f"File type not allowed: {extension or '(none)'}", field="file"
            )
        checksum, size = await asyncio.to_thread(
            _compute_checksum_and_size_sync, upload.file_data
        )
        if size == 0:
            raise ValidationException("File is empty", field="file")
        if size > self.max_upload_size:
            raise ValidationException(
                f"File exceeds maximum size of {self.max_upload_size} bytes",
                field="file",
            )
        content_type = (
            upload.content_type
            or mimetypes.guess_type(f"x{extension}")[0]
            or "application/octet-stream"
        )
        storage_ref = (
            f"{CATEGORY_STORAGE_PREFIX}-{category_id}/"
            f"{sanitize_filename(upload.filename)}-{uuid.uuid4().hex[:12]}{extension}"
        )
        await self.storage.upload(
            upload.file_data,
            storage_ref,
            checksum,
            content_type,
            metadata={"original_filename": upload.filename or ""},
        )
        return {
            "storage_path": storage_ref,
            "original_filename": upload.filename,
            "extension": extension.lstrip("."),
            "content_type": content_type,
            "file_size": size,
            "checksum": checksum,
        }

    async def _discard(self, storage_ref: str) -> None:
        """Remove a stored file whose metadata could not be saved or was replaced."""
        try:
            await self.storage.delete(storage_ref)
        except PortalException as e:
            logger.warning("Could not delete stored file %s: %s", storage_ref, e.message)

    async def upload(
        self,
        upload: UploadedFile,
        *,
        name: str,
        category_id: int,
        description: str | None = None,
        document_type_id: int | None = None,
        fiscal_year: int | None = None,
        periodicity: str | None = None,
        issuing_institution: str | None = None,
        publication_date: datetime | None = None,
        created_by: int | None = None,
    ) -> DocumentResult:
        """Store the file under category-{id}/ and create the document row."""
        clean_name = sanitize_text(name)
        if not clean_name:
            raise ValidationException("Document name is required", field="name")
        _check_periodicity(periodicity)
        await self._require_target_category(category_id)
        await self._require_document_type(document_type_id)

        file_fields = await self._store(upload, category_id)
        try:
            document = await self.document_repo.create_document(
                DocumentCreate(
                    name=clean_name,
                    description=sanitize_text(description),
                    category_id=category_id,
                    document_type_id=document_type_id,
                    fiscal_year=fiscal_year or current_fiscal_year(),
                    periodicity=periodicity,
                    issuing_institution=(
                        sanitize_text(issuing_institution) or self.default_institution
                    ),
                    publication_date=publication_date,
                    created_by=created_by,
                    **file_fields,
                )
            )
        except Exception:
            await self._discard(file_fields["storage_path"])
            raise
        logger.info(
            "Uploaded document %s to category %s (%s bytes)",
            document.id,
            category_id,
            document.file_size,
        )
        return document

    async def update(
        self,
        document_id: int,
        changes: dict[str, Any],
        upload: UploadedFile | None = None,
        updated_by: int | None = None,
    ) -> DocumentResult:
        """Partial metadata update; a new file replaces (and then deletes) the old one."""
        current = await self.document_repo.get_active(document_id)
        if current is None:
            raise ResourceNotFoundException("document", document_id)
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Unknown document fields: {', '.join(sorted(unknown))}"
            )
        fields = dict(changes)
        for text_field in ("name", "description", "issuing_institution"):
            if text_field in fields:
                fields[text_field] = sanitize_text(fields[text_field])
        if "name" in fields and not fields["name"]:
            raise ValidationException("Document name is required", field="name")
        if "periodicity" in fields:
            _check_periodicity(fields["periodicity"])
        target_category = fields.get("category_id", current.category_id)
        if "category_id" in fields and fields["category_id"] != current.category_id:
            await self._require_target_category(fields["category_id"])
        if "document_type_id" in fields:
            await self._require_document_type(fields["document_type_id"])

        if upload is not None:
            fields.update(await self._store(upload, target_category))
        try:
            document = await self.document_repo.update_document(
                document_id, **fields, updated_by=updated_by
            )
        except Exception:
            if upload is not None:
                await self._discard(fields["storage_path"])
            raise
        if upload is not None:
            cleanup = partial(self._discard, current.storage_path)
            if self.defer_until_commit is not None:
                self.defer_until_commit(cleanup)
            else:
                await cleanup()
        return document

    async def delete(self, document_id: int, deleted_by: int | None = None) -> DocumentResult:
        """Soft delete; the stored file is kept."""
        current = await self.document_repo.get_active(document_id)
        if current is None:
            raise ResourceNotFoundException("document", document_id)
        document = await self.document_repo.update_document(
            document_id, is_active=False, updated_by=deleted_by
        )
        logger.info("Soft-deleted document %s", document_id)
        return document


class DocumentQueryService:
    """Read-side document lookups and file access. Inactive documents are not found."""

    def __init__(
        self,
        document_repo: IDocumentRepository,
        storage_service: IStorageService | None = None,
    ) -> None:
        self.document_repo = document_repo
        self.storage = storage_service

    async def get_document(self, document_id: int) -> DocumentResult:
        document = await self.document_repo.get_active(document_id)
        if document is None:
            raise ResourceNotFoundException("document", document_id)
        return document

    async def list_by_category(self, category_id: int) -> list[DocumentResult]:
        return await self.document_repo.list_by_category(category_id)

    async def search_by_name(self, term: str) -> list[DocumentResult]:
        cleaned = (term or "").strip()
        if len(cleaned) < MIN_SEARCH_TERM_LENGTH:
            raise ValidationException(
                f"Search term must have at least {MIN_SEARCH_TERM_LENGTH} characters",
                field="q",
            )
        return await self.document_repo.search_by_name(cleaned)

    async def recent(self, limit: int) -> list[DocumentResult]:
        return await self.document_repo.list_recent(limit)

    async def category_stats(self, category_id: int) -> CategoryDocumentStats:
        return CategoryDocumentStats(
            category_id=category_id,
            total=await self.document_repo.count_active(category_id),
            by_fiscal_year=await self.document_repo.count_by_fiscal_year(category_id),
        )

    async def open_file(self, document_id: int) -> DocumentFile:
        """Active document plus a byte stream of its stored file.

        Raises:
            ResourceNotFoundException: document missing or inactive.
            StorageNotFoundError: metadata exists but the file is gone.
        """
        if self.storage is None:
            raise RuntimeError("DocumentQueryService.open_file requires a storage service")
        document = await self.get_document(document_id)
        if not await self.storage.exists(document.storage_path):
            raise StorageNotFoundError(document.storage_path)
        extension = f".{document.extension}" if document.extension else ""
        media_type = (
            document.content_type
            or mimetypes.guess_type(f"x{extension}")[0]
            or "application/octet-stream"
        )
        return DocumentFile(
            document=document,
            chunks=self.storage.download(document.storage_path),
            media_type=media_type,
            filename=f"{sanitize_filename(document.name)}{extension}",
        )
