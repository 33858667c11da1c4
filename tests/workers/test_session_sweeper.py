"""Tests for the background session sweeper."""

import asyncio
from datetime import timedelta

from audiocast.domain.access.session_store import SessionStore
from audiocast.workers.session_sweeper import SessionSweeper


class TestSessionSweeper:
    async def test_sweeper_removes_expired_sessions(self, clock):
        store = SessionStore(max_age=timedelta(minutes=5), clock=clock)
        expired = store.create()
        clock.advance(minutes=6)
        fresh = store.create()

        sweeper = SessionSweeper(store, interval_seconds=0.01)
        sweeper.start()
        try:
            await asyncio.sleep(0.05)
        finally:
            await sweeper.stop()

        assert expired.session_id not in store
        assert fresh.session_id in store
        assert len(store) == 1

    async def test_start_is_idempotent_and_stop_cancels(self, clock):
        sweeper = SessionSweeper(SessionStore(max_age=timedelta(minutes=5), clock=clock), 60)

        sweeper.start()
        sweeper.start()
        assert sweeper.running is True

        await sweeper.stop()
        assert sweeper.running is False

    async def test_stop_without_start_is_noop(self, clock):
        sweeper = SessionSweeper(SessionStore(max_age=timedelta(minutes=5), clock=clock), 60)

        await sweeper.stop()

        assert sweeper.running is False
