"""
tests/test_user_store.py -- Unit tests for auth.store.UserStore.

Each test gets its own named shared-memory SQLite database via the `store`
fixture in conftest.py.
"""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.store import UserStore

from conftest import count_users


def _user(email: str = "ada@example.com") -> User:
    return User(email=email, first_name="Ada", last_name="Lovelace", password_hash="$2b$04$fakehash")


class TestCreateAndLookup:
    def test_create_assigns_id_and_created_at(self, store: UserStore) -> None:
        user = _user()
        user_id = store.create_user(user)
        assert isinstance(user_id, int)
        assert user.id == user_id
        assert user.created_at

    def test_get_by_email_round_trip(self, store: UserStore) -> None:
        store.create_user(_user())
        found = store.get_by_email("ada@example.com")
        assert found is not None
        assert found.first_name == "Ada"
        assert found.last_name == "Lovelace"
        assert found.updated_at is None

    def test_get_by_email_is_case_sensitive(self, store: UserStore) -> None:
        store.create_user(_user("Ada@Example.com"))
        assert store.get_by_email("ada@example.com") is None
        assert store.get_by_email("Ada@Example.com") is not None

    def test_missing_email_returns_none(self, store: UserStore) -> None:
        assert store.get_by_email("nobody@example.com") is None


class TestUniqueness:
    def test_duplicate_email_raises_integrity_error(self, store: UserStore) -> None:
        store.create_user(_user())
        with pytest.raises(IntegrityError):
            store.create_user(_user())
        assert count_users(store, "ada@example.com") == 1


class TestReplace:
    def test_replace_writes_full_record(self, store: UserStore) -> None:
        store.create_user(_user())
        user = store.get_by_email("ada@example.com")
        user.first_name = "Augusta"
        user.updated_at = "2026-01-01T00:00:00+00:00"
        assert store.replace_user(user) is True

        reloaded = store.get_by_email("ada@example.com")
        assert reloaded.first_name == "Augusta"
        assert reloaded.updated_at == "2026-01-01T00:00:00+00:00"
        assert reloaded.last_name == "Lovelace"
        assert reloaded.id == user.id

    def test_replace_unknown_email_returns_false(self, store: UserStore) -> None:
        assert store.replace_user(_user("ghost@example.com")) is False


def test_ping(store: UserStore) -> None:
    assert store.ping() is True
