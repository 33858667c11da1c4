"""Broadcast domain service - host/viewer lifecycle and signaling relay."""

from typing import Any

from loguru import logger

from audiocast.schemas import ConnectionId

from .broadcast_models import SignalEvent, StatsSnapshot
from .connection_registry import ConnectionRegistry
from .errors import NoHostError
from .notifier import Notifier
from .signaling_router import SignalingRouter
from .stats_broadcaster import StatsBroadcaster


class BroadcastService:
    """Single owner of the registry, the router and the stats broadcaster."""

    def __init__(self, notifier: Notifier):
        self.notifier = notifier
        self.registry = ConnectionRegistry(notifier)
        self.stats = StatsBroadcaster(self.registry, notifier)
        self.stats.attach()
        self.router = SignalingRouter(self.registry, notifier)

    # ==================== LIFECYCLE ====================

    def connect(self, connection_id: ConnectionId) -> None:
        self.registry.connect(connection_id)

    def disconnect(self, connection_id: ConnectionId) -> None:
        self.registry.disconnect(connection_id)

    def register_host(self, connection_id: ConnectionId) -> None:
        self.registry.register_host(connection_id)

    def viewer_join(self, connection_id: ConnectionId) -> bool:
        """Join as viewer. Replies `no-host` instead of raising when nobody is hosting."""
        try:
            self.registry.viewer_join(connection_id)
        except NoHostError:
            logger.info("Viewer {} joined with no host present", connection_id)
            self.notifier.send(connection_id, SignalEvent.NO_HOST)
            return False
        return True

    def viewer_leave(self, connection_id: ConnectionId) -> None:
        self.registry.viewer_leave(connection_id)

    def announce_streaming(self, host_id: ConnectionId) -> bool:
        return self.registry.announce_streaming(host_id)

    def host_stopped_streaming(self, host_id: ConnectionId) -> bool:
        return self.registry.host_stopped_streaming(host_id)

    # ==================== RELAY ====================

    def relay_offer(self, viewer_id: ConnectionId, sdp: Any, from_host_id: ConnectionId) -> bool:
        return self.router.relay_offer(viewer_id, sdp, from_host_id)

    def relay_answer(self, host_id: ConnectionId, sdp: Any, from_viewer_id: ConnectionId) -> bool:
        return self.router.relay_answer(host_id, sdp, from_viewer_id)

    def relay_ice_candidate(
        self, target_id: ConnectionId | None, candidate: Any, from_id: ConnectionId
    ) -> bool:
        return self.router.relay_ice_candidate(target_id, candidate, from_id)

    def relay_listener_stats(self, from_viewer_id: ConnectionId, metrics: dict[str, Any]) -> bool:
        return self.router.relay_listener_stats(from_viewer_id, metrics)

    def request_viewer_disconnect(self, from_host_id: ConnectionId, viewer_id: ConnectionId) -> bool:
        return self.router.request_viewer_disconnect(from_host_id, viewer_id)

    # ==================== STATS ====================

    def snapshot(self) -> StatsSnapshot:
        return self.stats.snapshot()
