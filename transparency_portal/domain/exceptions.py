"""Domain exceptions for the transparency portal.

Business rule violations raised by services and use cases. Independent
of infrastructure; the presentation layer maps them to HTTP responses in
core.exception_handlers.
"""

from typing import Any


class PortalException(Exception):
    """Base exception for all portal application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serializable form used by the HTTP error envelope."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(PortalException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(PortalException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(PortalException):
    """Raised when the user lacks required permissions for the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'category', 'document').
            action: Optional action that was attempted (e.g. 'create').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(PortalException):
    """Raised when a requested resource does not exist or is inactive."""

    def __init__(self, resource_type: str, resource_id: int | str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'category', 'document').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictException(PortalException):
    """Raised when an operation would break a structural rule.

    reason is a short machine-readable tag so callers can pick a remedy
    (e.g. 'children' or 'documents' for a blocked delete, 'cycle' for an
    invalid reparent).
    """

    def __init__(
        self,
        message: str,
        reason: str,
        details_extra: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details_extra or {})
        details["reason"] = reason
        super().__init__(message, "CONFLICT", details)
        self.reason = reason


class CategoryHasChildrenException(ConflictException):
    """Raised when deleting a category that still has active children."""

    def __init__(self, category_id: int, child_count: int) -> None:
        super().__init__(
            f"Category {category_id} has {child_count} active subcategories",
            "children",
            {"category_id": category_id, "count": child_count},
        )


class CategoryHasDocumentsException(ConflictException):
    """Raised when deleting a category that still owns active documents."""

    def __init__(self, category_id: int, document_count: int) -> None:
        super().__init__(
            f"Category {category_id} has {document_count} active documents",
            "documents",
            {"category_id": category_id, "count": document_count},
        )


class CategoryCycleException(ConflictException):
    """Raised when a reparent would make a category its own ancestor."""

    def __init__(self, category_id: int, parent_id: int) -> None:
        super().__init__(
            f"Category {category_id} cannot be moved under {parent_id}",
            "cycle",
            {"category_id": category_id, "parent_id": parent_id},
        )


class DuplicateUserException(ConflictException):
    """Raised when a username or email is already taken by another user."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(
            f"A user with this {field} already exists",
            "duplicate",
            {"field": field, "value": value},
        )
