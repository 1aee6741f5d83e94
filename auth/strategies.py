"""
auth/strategies.py -- Pluggable authentication strategies.

Two strategies share one contract:

    async authenticate(request) -> User | Reject

  LocalStrategy  -- email + password from the JSON body, checked against the
                    user store with bcrypt. Used by POST /login only.
  BearerStrategy -- Authorization: Bearer <jwt>, verified by the TokenSigner,
                    then resolved back to an active User.

Strategies never raise for an authentication failure. They return a Reject
carrying an internal reason; the request gate (auth/dependencies.py) decides
what the caller sees. Store and bcrypt calls are blocking, so they run in the
thread pool via run_in_threadpool to keep the event loop free.

Collaborators are read from request.app.state (user_store, tokens), which the
app lifespan populates once at startup.

Layer rule: no imports from api/ or content/.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import ClassVar, Protocol, Union

from fastapi import Request
from starlette.concurrency import run_in_threadpool

from auth.models import User
from auth.passwords import dummy_hash, verify_password
from auth.store import UserStore
from auth.tokens import TokenSigner

# Internal reject reasons. Logged by the gate; only surfaced to clients when
# Settings.expose_auth_reasons is on.
MISSING_CREDENTIALS = "missing credentials"
UNKNOWN_USER = "user does not exist"
WRONG_PASSWORD = "incorrect password"
MISSING_TOKEN = "missing bearer token"
INVALID_TOKEN = "invalid or expired token"
DELETED_USER = "user no longer exists"


@dataclass(frozen=True)
class Reject:
    reason: str


AuthResult = Union[User, Reject]


class Strategy(Protocol):
    name: ClassVar[str]

    async def authenticate(self, request: Request) -> AuthResult: ...


def extract_bearer_token(request: Request) -> str | None:
    """Return the token from an "Authorization: Bearer <token>" header, or None.

    The scheme is matched case-insensitively. Cookies, query strings and other
    headers are never consulted.
    """
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


class LocalStrategy:
    """Email + password login.

    Start -> ReadCredentials -> LookupUser -> VerifyPassword -> Accept | Reject
    """

    name: ClassVar[str] = "local"

    async def authenticate(self, request: Request) -> AuthResult:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return Reject(MISSING_CREDENTIALS)
        if not isinstance(body, dict):
            return Reject(MISSING_CREDENTIALS)
        email = body.get("email")
        password = body.get("password")
        if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
            return Reject(MISSING_CREDENTIALS)

        store: UserStore = request.app.state.user_store
        return await run_in_threadpool(self.check, store, email.strip(), password)

    @staticmethod
    def check(store: UserStore, email: str, password: str) -> AuthResult:
        """Blocking half of the strategy: store lookup plus bcrypt.

        Always runs bcrypt, even for an unknown email, so both failure paths
        cost the same and response time does not reveal registered emails.
        """
        user = store.get_by_email(email)
        if user is None:
            verify_password(password, dummy_hash())
            return Reject(UNKNOWN_USER)
        if not verify_password(password, user.hashed_password):
            return Reject(WRONG_PASSWORD)
        return user


class BearerStrategy:
    """Stateless JWT bearer authentication.

    Start -> ExtractToken -> VerifyToken -> ResolveUser -> Accept | Reject

    ResolveUser re-reads the account on every request: a token for a user who
    was soft-deleted after issuance still verifies cryptographically but is
    rejected here.
    """

    name: ClassVar[str] = "bearer"

    async def authenticate(self, request: Request) -> AuthResult:
        token = extract_bearer_token(request)
        if token is None:
            return Reject(MISSING_TOKEN)

        tokens: TokenSigner = request.app.state.tokens
        claims = tokens.verify(token)
        if claims is None:
            return Reject(INVALID_TOKEN)

        store: UserStore = request.app.state.user_store
        user = await run_in_threadpool(store.get_by_id, claims.user_id)
        if user is None:
            return Reject(DELETED_USER)
        return user
