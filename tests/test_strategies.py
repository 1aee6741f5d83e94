"""Unit tests for auth/strategies.py.

Covers:
- LocalStrategy.check: unknown user, wrong password, soft-deleted user, accept
- extract_bearer_token: header parsing rules
"""

import pytest
from starlette.requests import Request

from auth.models import User
from auth.passwords import hash_password
from auth.strategies import (
    UNKNOWN_USER,
    WRONG_PASSWORD,
    LocalStrategy,
    Reject,
    extract_bearer_token,
)


@pytest.fixture
def seeded(user_store):
    uid = user_store.create_user(User(name="Ada", email="ada@example.com", hashed_password=hash_password("s3cret")))
    return user_store, uid


def test_local_accepts_valid_credentials(seeded):
    store, uid = seeded
    result = LocalStrategy.check(store, "ada@example.com", "s3cret")
    assert isinstance(result, User)
    assert result.id == uid


def test_local_rejects_unknown_user(seeded):
    store, _ = seeded
    assert LocalStrategy.check(store, "nobody@example.com", "s3cret") == Reject(UNKNOWN_USER)


def test_local_rejects_wrong_password(seeded):
    store, _ = seeded
    assert LocalStrategy.check(store, "ada@example.com", "nope") == Reject(WRONG_PASSWORD)


def test_local_rejects_soft_deleted_user(seeded):
    store, uid = seeded
    store.delete_user(uid)
    assert LocalStrategy.check(store, "ada@example.com", "s3cret") == Reject(UNKNOWN_USER)


def _request(headers: dict) -> Request:
    raw = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw, "query_string": b""})


@pytest.mark.parametrize(
    "header, expected",
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("bearer abc", "abc"),
        ("BEARER   abc  ", "abc"),
        ("Basic abc", None),
        ("Bearer", None),
        ("Bearer ", None),
        ("abc.def.ghi", None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(_request({"Authorization": header})) == expected


def test_extract_bearer_token_absent():
    assert extract_bearer_token(_request({})) is None
