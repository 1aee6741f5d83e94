"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in content/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/ or content/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    email is the login identifier and is unique across all rows, including
    soft-deleted ones. hashed_password is a bcrypt hash and never leaves the
    server. deleted_at is None for active accounts; the store excludes
    soft-deleted rows from every default lookup.
    """

    name: str
    email: str
    hashed_password: str
    id: int | None = None
    created_at: str | None = None
    updated_at: str | None = None
    deleted_at: str | None = None

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None


@dataclass(frozen=True)
class Principal:
    """The authenticated identity attached to one request after a strategy accepts.

    Built from a verified User. Never persisted; lives in request.state.principal
    for the duration of the request.
    """

    id: int
    email: str
    name: str

    @classmethod
    def from_user(cls, user: User) -> Principal:
        return cls(id=user.id, email=user.email, name=user.name)


@dataclass(frozen=True)
class TokenClaims:
    """Claims recovered from a bearer token whose signature and expiry checked out."""

    user_id: int
    email: str
    issued_at: int  # unix seconds
    expires_at: int  # unix seconds
