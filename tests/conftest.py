"""
tests/conftest.py -- Shared test fixtures for Inkwell integration tests.

This module provides:
  - make_test_stores(): creates isolated in-memory DBs for users + content
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient plus a signed-up user and a valid bearer token
  - user_store / content_store: bare stores for unit tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs route handlers in a thread pool. Plain :memory: DBs
are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares
one in-memory instance across all connections in the same process.

SECRET_KEY must be set before any api/auth/core import: Settings refuses to
start without it. BCRYPT_ROUNDS=4 keeps hashing fast; LOGIN_RATE_LIMIT is
raised so the login limiter never trips during the suite.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager
from dataclasses import dataclass

# CRITICAL: configure the environment before any project import.
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789abcdef0123456789abcdef")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOGIN_RATE_LIMIT", "1000/minute")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import User
from auth.passwords import hash_password
from auth.store import UserStore
from auth.tokens import TokenSigner
from content.store import ContentStore
from core.config import get_settings

TEST_NAME = "Test Writer"
TEST_EMAIL = "writer@example.com"
TEST_PASSWORD = "testpass123"


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def make_test_stores(db_suffix: str) -> tuple[UserStore, ContentStore]:
    """Create stores over one named shared-memory SQLite database.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    url = f"sqlite:///file:test_inkwell_{db_suffix}?mode=memory&cache=shared&uri=true"
    return UserStore(url), ContentStore(url)


def _patch_lifespan(user_store: UserStore, content: ContentStore, tokens: TokenSigner):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test stores into app.state so TestClient routes see
    isolated test DBs rather than the configured DATABASE_URL.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.settings = get_settings()
        app.state.tokens = tokens
        app.state.user_store = user_store
        app.state.content = content
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@dataclass
class ApiContext:
    client: TestClient
    token: str
    user_id: int
    tokens: TokenSigner
    user_store: UserStore
    content: ContentStore

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture(scope="module")
def api_client(request) -> Generator[ApiContext, None, None]:
    """Yield an ApiContext for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers but use isolated in-memory stores.
    A user (TEST_EMAIL / TEST_PASSWORD) is created before the client starts
    and a bearer token is minted for it.
    """
    user_store, content = make_test_stores(request.module.__name__.replace(".", "_"))
    tokens = TokenSigner.from_settings(get_settings())

    uid = user_store.create_user(User(name=TEST_NAME, email=TEST_EMAIL, hashed_password=hash_password(TEST_PASSWORD)))
    token = tokens.issue(uid, TEST_EMAIL)

    app.router.lifespan_context = _patch_lifespan(user_store, content, tokens)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield ApiContext(client, token, uid, tokens, user_store, content)

    user_store.close()
    content.close()


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def content_store() -> Generator[ContentStore, None, None]:
    store = ContentStore("sqlite:///:memory:")
    yield store
    store.close()
