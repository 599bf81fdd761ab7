"""Application services: descendant resolution, availability, authorization."""

from transparency_portal.application.services.authorization_service import (
    AuthorizationService,
)
from transparency_portal.application.services.availability_service import (
    DocumentAvailabilityService,
)
from transparency_portal.application.services.descendant_resolver import (
    DescendantResolver,
)

__all__ = [
    "AuthorizationService",
    "DescendantResolver",
    "DocumentAvailabilityService",
]
