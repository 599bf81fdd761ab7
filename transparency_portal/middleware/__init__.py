"""ASGI middleware."""

from transparency_portal.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
