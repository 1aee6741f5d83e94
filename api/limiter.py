"""
api/limiter.py -- Shared slowapi rate limiter instance.

Import this in both api/main.py (to mount as middleware) and
api/routes/auth.py (to apply per-route limits).

Using a single shared instance ensures all routes share the same in-memory
counter store. If this were instantiated in each module separately, each
module would get its own isolated counter and rate limits would never trigger.

The login limit is applied through login_throttle, a route-level dependency.
Route-level dependencies run before the endpoint's own, so every attempt is
counted, including the ones the local strategy rejects with 401.
"""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import get_settings

limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")


def login_rate_limit() -> str:
    """Limit string for POST /login, read from Settings on each check."""
    return get_settings().login_rate_limit


@limiter.limit(login_rate_limit)
async def login_throttle(request: Request) -> None:
    """Raise RateLimitExceeded once the client's login budget is spent."""
