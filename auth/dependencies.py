"""
auth/dependencies.py -- Request gate: FastAPI Depends() helpers for authentication.

Each protected route is bound to exactly one strategy when the route is
declared:

    @router.post("/authors", dependencies=[Depends(require_bearer)])
    @router.post("/login")  ...  user: User = Depends(require_local)

Public routes simply declare no gate. There is no runtime lookup by
strategy name -- the binding is fixed at import time.

On Reject the gate raises AuthenticationError (401) before the handler body
runs, so a rejected request has no side effects. On Accept it stores a
Principal in request.state.principal and hands the User to the handler.

Rejection messages: the strategy's reason ("user does not exist",
"incorrect password", ...) is always logged. Clients only see it when
Settings.expose_auth_reasons is on; otherwise every local failure reads
"Invalid email or password." and every bearer failure reads
"Authentication required." so responses cannot be used to enumerate accounts.

Layer rule: no imports from api/ or content/.
  auth/dependencies.py may import from fastapi (for Depends/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import Request

from auth.models import Principal, User
from auth.strategies import BearerStrategy, LocalStrategy, Reject, Strategy
from core.config import get_settings
from core.errors import AuthenticationError

logger = logging.getLogger("inkwell.auth")

_GENERIC_MESSAGES = {
    LocalStrategy.name: "Invalid email or password.",
    BearerStrategy.name: "Authentication required.",
}

# WWW-Authenticate challenge per strategy (RFC 6750 for bearer).
_CHALLENGES = {
    BearerStrategy.name: "Bearer",
}


def authenticated(strategy: Strategy) -> Callable[[Request], Awaitable[User]]:
    """Build a gate dependency bound to one strategy instance."""

    async def gate(request: Request) -> User:
        result = await strategy.authenticate(request)
        if isinstance(result, Reject):
            logger.info(
                "%s auth rejected on %s %s: %s",
                strategy.name,
                request.method,
                request.url.path,
                result.reason,
            )
            if get_settings().expose_auth_reasons:
                message = result.reason
            else:
                message = _GENERIC_MESSAGES.get(strategy.name, "Authentication required.")
            raise AuthenticationError(message, scheme=_CHALLENGES.get(strategy.name))
        request.state.principal = Principal.from_user(result)
        return result

    gate.__name__ = f"require_{strategy.name}"
    return gate


require_local = authenticated(LocalStrategy())
require_bearer = authenticated(BearerStrategy())


def get_principal(request: Request) -> Principal:
    """Return the Principal a gate attached to this request.

    Only meaningful inside a handler (or dependency) that runs after a gate.
    Raises AuthenticationError if no gate accepted the request.
    """
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise AuthenticationError("Authentication required.", scheme="Bearer")
    return principal
