"""Tests for the host-session TTL table."""

from datetime import timedelta

import pytest

from audiocast.domain.access.session_store import SessionStore
from audiocast.schemas import SessionRole


@pytest.fixture
def store(clock) -> SessionStore:
    return SessionStore(max_age=timedelta(hours=24), clock=clock)


class TestCreate:
    def test_create_issues_prefixed_unique_ids(self, store):
        first = store.create()
        second = store.create()

        assert first.session_id.startswith("hs_")
        assert first.session_id != second.session_id
        assert first.role == SessionRole.HOST
        assert len(store) == 2

    def test_expiry_is_creation_plus_max_age(self, store, clock):
        session = store.create()

        assert store.expires_at(session) == clock.now + timedelta(hours=24)


class TestGet:
    def test_fresh_session_is_found(self, store):
        session = store.create()

        assert store.get(session.session_id) == session
        assert session.session_id in store

    def test_missing_or_empty_id_returns_none(self, store):
        assert store.get("hs_unknown") is None
        assert store.get("") is None
        assert store.get(None) is None

    def test_session_just_before_expiry_is_valid(self, store, clock):
        session = store.create()
        clock.advance(hours=23, minutes=59, seconds=59)

        assert store.get(session.session_id) is not None

    def test_expired_session_is_never_returned(self, store, clock):
        session = store.create()
        clock.advance(hours=24)

        assert store.get(session.session_id) is None
        # Still physically present until swept
        assert len(store) == 1


class TestSweep:
    def test_sweep_removes_only_expired(self, store, clock):
        old = store.create()
        clock.advance(hours=20)
        recent = store.create()
        clock.advance(hours=5)

        assert store.sweep() == 1

        assert old.session_id not in store
        assert recent.session_id in store
        assert len(store) == 1

    def test_sweep_with_nothing_expired(self, store):
        store.create()

        assert store.sweep() == 0
        assert len(store) == 1

    def test_sweep_accepts_explicit_time(self, store, clock):
        store.create()

        assert store.sweep(now=clock.now + timedelta(days=2)) == 1
        assert len(store) == 0


class TestRevoke:
    def test_revoke_removes_session(self, store):
        session = store.create()

        assert store.revoke(session.session_id) is True
        assert store.get(session.session_id) is None
        assert store.revoke(session.session_id) is False
