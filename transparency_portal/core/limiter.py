"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the
same instance without circular imports. Endpoints decorated here must
accept a `request: Request` parameter.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from transparency_portal.core.config import get_settings

limiter = Limiter(key_func=get_remote_address)


def _login_limit() -> str:
    return get_settings().rate_limit_login


def _write_limit() -> str:
    return get_settings().rate_limit_writes


limit_auth = limiter.limit(_login_limit)
limit_writes = limiter.limit(_write_limit)
