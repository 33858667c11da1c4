from loguru import logger

from .broadcast_models import SignalEvent, StatsSnapshot
from .connection_registry import ConnectionRegistry
from .notifier import Notifier


class StatsBroadcaster:
    """Publishes a full registry snapshot to every connection after each change."""

    def __init__(self, registry: ConnectionRegistry, notifier: Notifier):
        self._registry = registry
        self._notifier = notifier
        self.last_snapshot: StatsSnapshot | None = None

    def attach(self) -> None:
        self._registry.subscribe(self.publish)

    def snapshot(self) -> StatsSnapshot:
        return StatsSnapshot(
            viewer_count=self._registry.viewer_count,
            host_present=self._registry.has_host,
            viewer_ids=[str(viewer_id) for viewer_id in self._registry.viewer_ids()],
        )

    def publish(self) -> StatsSnapshot:
        snapshot = self.snapshot()
        delivered = self._notifier.broadcast(SignalEvent.STATS, snapshot)
        self.last_snapshot = snapshot
        logger.debug(
            "Stats broadcast to {} connections: viewers={} host={}",
            delivered,
            snapshot.viewer_count,
            snapshot.host_present,
        )
        return snapshot
