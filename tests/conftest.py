"""
tests/conftest.py -- Shared test fixtures for the GiftLink account service.

This module provides:
  - make_store(): an isolated named shared-memory SQLite UserStore
  - make_service(): an AccountService over a store with a cheap bcrypt cost
  - _patch_lifespan(): wires a test service into app.state, bypassing real startup
  - api_client: TestClient over the real FastAPI app with isolated stores

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.

The DEBUG env var must be set before any api/core import so get_settings()
auto-generates JWT_SECRET in dev mode instead of raising ValueError.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set DEBUG before any api/core import so get_settings() can
# auto-generate JWT_SECRET in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from api.main import app
from auth.passwords import PasswordHasher
from auth.service import AccountService
from auth.store import UserStore
from auth.tokens import TokenIssuer

TEST_SECRET = "test-secret-for-giftlink-auth-0123456789abcdef"

# Lowest cost bcrypt accepts; keeps the suite fast. Cost-10 behaviour is
# covered in test_passwords.py.
TEST_ROUNDS = 4


def make_store(db_suffix: str | None = None) -> UserStore:
    """Create an isolated named shared-memory SQLite store.

    Args:
        db_suffix: Unique string appended to the DB name so tests don't share
                   state. A random one is used when omitted.
    """
    suffix = db_suffix or uuid.uuid4().hex
    return UserStore(db_url=f"sqlite:///file:test_auth_{suffix}?mode=memory&cache=shared&uri=true")


def make_service(store: UserStore) -> AccountService:
    return AccountService(
        store=store,
        hasher=PasswordHasher(rounds=TEST_ROUNDS),
        issuer=TokenIssuer(TEST_SECRET),
    )


def _patch_lifespan(service: AccountService):
    """Return an async context manager that replaces the real lifespan.

    Wires the pre-built test service and its store into app.state so
    TestClient routes hit isolated in-memory databases.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.store = service.store
        app.state.accounts = service
        yield

    return test_lifespan


@pytest.fixture
def store() -> Generator[UserStore, None, None]:
    s = make_store()
    yield s
    s.close()


@pytest.fixture
def service(store: UserStore) -> AccountService:
    return make_service(store)


@pytest.fixture(scope="module")
def api_client() -> Generator[TestClient, None, None]:
    """Yield a TestClient over the real app with an isolated store per test module.

    The app's AccountService is reachable as client.app.state.accounts, so
    tests can look records up in the store and decode issued tokens.
    """
    module_store = make_store()
    app.router.lifespan_context = _patch_lifespan(make_service(module_store))

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client

    module_store.close()


def count_users(store: UserStore, email: str) -> int:
    """Number of rows holding email, read straight from the store's engine."""
    with store.engine.connect() as conn:
        return conn.execute(text("SELECT COUNT(*) FROM users WHERE email = :email"), {"email": email}).scalar()


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"
