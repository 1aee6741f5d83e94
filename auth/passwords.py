"""
auth/passwords.py -- Password hashing and verification (bcrypt).

bcrypt output is self-describing: "$2b$<cost>$<22-char salt><31-char digest>".
verify_password() recomputes with the cost and salt embedded in the stored
hash, so changing BCRYPT_ROUNDS never invalidates existing accounts.

Using bcrypt directly rather than passlib[bcrypt] because passlib's internal
wrap-bug detection creates a password longer than 72 bytes, which bcrypt 4.x
rejects with an explicit error.

Layer rule: no imports from api/ or content/.
"""

from __future__ import annotations

from functools import lru_cache

import bcrypt

from core.config import get_settings


def hash_password(plain: str, rounds: int | None = None) -> str:
    """Return a bcrypt hash of the given plaintext password.

    A fresh random salt is generated on every call, so hashing the same
    password twice yields two different strings.

    Passwords longer than 72 bytes are silently truncated by bcrypt. The API
    layer caps password length at 72 characters of input (Pydantic field).
    """
    cost = rounds if rounds is not None else get_settings().bcrypt_rounds
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A malformed or empty hash returns False instead of raising, so callers
    never branch on hash structure.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except (TypeError, ValueError):
        return False


@lru_cache
def dummy_hash() -> str:
    """Hash checked when the account does not exist.

    Running bcrypt against this value keeps "unknown email" and "wrong
    password" equally slow, so response time does not reveal which emails are
    registered. Computed once, at the configured cost.
    """
    return hash_password("inkwell_timing_dummy")
