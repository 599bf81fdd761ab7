"""Health check endpoint. No database access; used for liveness checks."""

from fastapi import APIRouter, Request

from transparency_portal.core.config import get_settings
from transparency_portal.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Return ok plus the app version and which cache backend is live."""
    cache = getattr(request.app.state, "cache", None)
    if cache is None:
        cache_state = None
    elif not cache.is_available():
        cache_state = "unavailable"
    else:
        cache_state = getattr(request.app.state, "cache_backend", None)
    return HealthResponse(version=get_settings().app_version, cache=cache_state)
