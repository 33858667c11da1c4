"""Tests for the host page access decision."""

from datetime import timedelta

import pytest

from audiocast.domain.access.access_gate import AccessDecision, AccessGate, is_loopback
from audiocast.domain.access.session_store import SessionStore
from audiocast.schemas import SessionRole


@pytest.fixture
def store(clock) -> SessionStore:
    return SessionStore(max_age=timedelta(minutes=10), clock=clock)


@pytest.fixture
def gate(store) -> AccessGate:
    return AccessGate(store)


class TestIsLoopback:
    @pytest.mark.parametrize(
        "host",
        ["127.0.0.1", "127.1.2.3", "::1", "[::1]", "::ffff:127.0.0.1", "localhost", "LOCALHOST"],
    )
    def test_loopback_forms(self, host):
        assert is_loopback(host) is True

    @pytest.mark.parametrize(
        "host",
        ["192.168.1.20", "10.0.0.5", "::ffff:192.168.1.20", "fe80::1", "example.local", "", None],
    )
    def test_non_loopback_forms(self, host):
        assert is_loopback(host) is False


class TestAccessGate:
    def test_loopback_allowed_without_session(self, gate):
        decision = gate.check("127.0.0.1")

        assert decision == AccessDecision.ALLOW_LOOPBACK
        assert decision.allowed is True

    def test_lan_without_session_redirected(self, gate):
        decision = gate.check("192.168.1.20")

        assert decision == AccessDecision.REDIRECT
        assert decision.allowed is False

    def test_lan_with_host_session_allowed(self, gate, store):
        session = store.create(SessionRole.HOST)

        assert gate.check("192.168.1.20", session.session_id) == AccessDecision.ALLOW_SESSION

    def test_lan_with_unknown_session_redirected(self, gate):
        assert gate.check("192.168.1.20", "hs_forged") == AccessDecision.REDIRECT

    def test_lan_with_expired_session_redirected(self, gate, store, clock):
        session = store.create(SessionRole.HOST)
        clock.advance(minutes=10)

        assert gate.check("192.168.1.20", session.session_id) == AccessDecision.REDIRECT

    def test_viewer_role_session_does_not_open_host_page(self, gate, store):
        session = store.create(SessionRole.VIEWER)

        assert gate.check("192.168.1.20", session.session_id) == AccessDecision.REDIRECT
