from __future__ import annotations

import asyncio

from loguru import logger

from audiocast.domain.access.session_store import SessionStore


class SessionSweeper:
    """Periodically removes expired host sessions.

    Runs as its own task, independent of request handling, and touches only the
    session store. `stop` cancels it.
    """

    def __init__(self, session_store: SessionStore, interval_seconds: float):
        self._store = session_store
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="session-sweeper")
        logger.info("Session sweeper started (every {}s)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Session sweeper stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self._store.sweep()
            except Exception as exc:
                logger.error("Session sweep failed: {}: {}", type(exc).__name__, exc)
