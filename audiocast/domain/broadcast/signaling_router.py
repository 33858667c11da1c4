"""Relay of WebRTC negotiation messages between registry members."""

from typing import Any

from loguru import logger

from audiocast.schemas import ConnectionId

from .broadcast_models import ListenerStatsIn, SignalEvent
from .connection_registry import ConnectionRegistry
from .notifier import Notifier


class SignalingRouter:
    """Forwards offers, answers and ICE candidates by connection id.

    Payloads pass through untouched; only the sender id is attached. A target
    that is not a live connection gets nothing: the message is dropped without
    telling the sender, and is never queued or retried.

    Every relay returns True when the message was handed to the transport.
    """

    def __init__(self, registry: ConnectionRegistry, notifier: Notifier):
        self._registry = registry
        self._notifier = notifier

    def relay_offer(self, viewer_id: ConnectionId, sdp: Any, from_host_id: ConnectionId) -> bool:
        return self._relay(
            viewer_id,
            SignalEvent.WEBRTC_OFFER,
            {"sdp": sdp, "hostId": str(from_host_id)},
            from_host_id,
        )

    def relay_answer(self, host_id: ConnectionId, sdp: Any, from_viewer_id: ConnectionId) -> bool:
        return self._relay(
            host_id,
            SignalEvent.WEBRTC_ANSWER,
            {"sdp": sdp, "viewerId": str(from_viewer_id)},
            from_viewer_id,
        )

    def relay_ice_candidate(
        self, target_id: ConnectionId | None, candidate: Any, from_id: ConnectionId
    ) -> bool:
        if target_id is None:
            logger.debug("Dropped ICE candidate from {} without target", from_id)
            return False
        return self._relay(
            target_id,
            SignalEvent.WEBRTC_ICE_CANDIDATE,
            {"candidate": candidate, "from": str(from_id)},
            from_id,
        )

    def relay_listener_stats(self, from_viewer_id: ConnectionId, metrics: dict[str, Any]) -> bool:
        """Keep the viewer's latest quality report and pass the raw sample to the host."""
        report = ListenerStatsIn.model_validate(metrics).to_quality_report()
        if not self._registry.record_quality(from_viewer_id, report):
            logger.debug("Dropped listener stats from non-viewer {}", from_viewer_id)
            return False

        host_id = self._registry.host_id
        if host_id is None:
            return False

        payload = {**metrics, "viewerId": str(from_viewer_id)}
        return self._relay(host_id, SignalEvent.LISTENER_STATS, payload, from_viewer_id)

    def request_viewer_disconnect(self, from_host_id: ConnectionId, viewer_id: ConnectionId) -> bool:
        """Ask a viewer to hang up. Only the current host may do this."""
        if not self._registry.is_host(from_host_id):
            logger.debug("Dropped disconnect-viewer from non-host {}", from_host_id)
            return False
        if not self._registry.is_viewer(viewer_id):
            logger.debug("Dropped disconnect-viewer for unknown viewer {}", viewer_id)
            return False
        return self._relay(viewer_id, SignalEvent.DISCONNECT_REQUEST, None, from_host_id)

    def _relay(self, target_id: ConnectionId, event: SignalEvent, payload: Any, from_id: ConnectionId) -> bool:
        if not self._registry.is_live(target_id):
            logger.debug("Dropped {} from {} to unknown target {}", event, from_id, target_id)
            return False

        delivered = self._notifier.send(target_id, event, payload)
        if not delivered:
            logger.debug("Dropped {} from {}: target {} detached", event, from_id, target_id)
        return delivered
