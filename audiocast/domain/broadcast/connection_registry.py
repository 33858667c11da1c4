"""Authoritative record of the current host and the active viewers."""

from collections.abc import Callable

from loguru import logger

from audiocast.schemas import (
    Connection,
    ConnectionId,
    ConnectionRole,
    QualityReport,
    ViewerEntry,
)

from .broadcast_models import SignalEvent
from .errors import InvalidRoleTransitionError, NoHostError
from .notifier import Notifier
from .role_state_machine import ConnectionRoleMachine


class ConnectionRegistry:
    """Host slot, viewer set and per-connection records.

    Every method is synchronous and in-memory. Notifications go out through the
    notifier, which only enqueues, so no mutation is ever interrupted halfway.
    Listeners registered with `subscribe` run after each state change.
    """

    def __init__(self, notifier: Notifier):
        self._notifier = notifier
        self._connections: dict[ConnectionId, Connection] = {}
        self._host_id: ConnectionId | None = None
        self._viewers: dict[ConnectionId, ViewerEntry] = {}
        self._quality: dict[ConnectionId, QualityReport] = {}
        self._listeners: list[Callable[[], None]] = []

    # ==================== QUERIES ====================

    @property
    def host_id(self) -> ConnectionId | None:
        return self._host_id

    @property
    def has_host(self) -> bool:
        return self._host_id is not None

    @property
    def viewer_count(self) -> int:
        return len(self._viewers)

    def viewer_ids(self) -> list[ConnectionId]:
        return list(self._viewers)

    def connection_ids(self) -> list[ConnectionId]:
        return list(self._connections)

    def get_connection(self, connection_id: ConnectionId) -> Connection | None:
        return self._connections.get(connection_id)

    def is_live(self, connection_id: ConnectionId) -> bool:
        return connection_id in self._connections

    def is_host(self, connection_id: ConnectionId) -> bool:
        return self._host_id is not None and self._host_id == connection_id

    def is_viewer(self, connection_id: ConnectionId) -> bool:
        return connection_id in self._viewers

    def quality_report(self, connection_id: ConnectionId) -> QualityReport | None:
        return self._quality.get(connection_id)

    def subscribe(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    # ==================== LIFECYCLE ====================

    def connect(self, connection_id: ConnectionId) -> Connection:
        """Track a freshly accepted connection with no role."""
        connection = self._connections.get(connection_id)
        if connection is None:
            connection = Connection(connection_id=connection_id)
            self._connections[connection_id] = connection
            logger.debug("Connection {} tracked", connection_id)
        return connection

    def register_host(self, connection_id: ConnectionId) -> None:
        """Make `connection_id` the host, displacing any previous host."""
        connection = self.connect(connection_id)
        self._check_transition(connection, ConnectionRole.HOST)

        if self._viewers.pop(connection_id, None) is not None:
            self._quality.pop(connection_id, None)
            logger.info("Viewer {} is taking over as host", connection_id)

        previous = self._host_id
        if previous is not None and previous != connection_id:
            logger.warning("Host {} displaced by {}", previous, connection_id)
            self._set_role(previous, ConnectionRole.UNSET)
            self._evict_viewers()

        self._host_id = connection_id
        connection.role = ConnectionRole.HOST
        logger.info("Host registered: {}", connection_id)

        self._notifier.send(connection_id, SignalEvent.HOST_CONFIRMED)
        self._changed()

    def viewer_join(self, connection_id: ConnectionId) -> None:
        """Add a viewer and ask the host for an offer.

        Raises:
            NoHostError: No host is registered; nothing changes.
            InvalidRoleTransitionError: The connection is the host.
        """
        if self._host_id is None:
            raise NoHostError(connection_id)

        connection = self.connect(connection_id)
        self._check_transition(connection, ConnectionRole.VIEWER)

        if connection_id not in self._viewers:
            self._viewers[connection_id] = ViewerEntry()
        connection.role = ConnectionRole.VIEWER
        logger.info("Viewer {} joined ({} total)", connection_id, len(self._viewers))

        self._notifier.send(
            self._host_id, SignalEvent.VIEWER_JOINED, {"viewerId": str(connection_id)}
        )
        self._changed()

    def viewer_leave(self, connection_id: ConnectionId) -> bool:
        """Drop the role held by `connection_id`, keeping the connection tracked.

        Returns True when the host slot or the viewer set changed.
        """
        if self.is_host(connection_id):
            self._host_left(connection_id)
        elif self.is_viewer(connection_id):
            self._viewer_left(connection_id)
        else:
            return False

        self._changed()
        return True

    def disconnect(self, connection_id: ConnectionId) -> bool:
        """Forget a closed connection, cascading host/viewer departure."""
        changed = self.viewer_leave(connection_id)
        if self._connections.pop(connection_id, None) is not None:
            logger.debug("Connection {} forgotten", connection_id)
        return changed

    def announce_streaming(self, host_id: ConnectionId) -> bool:
        """Re-offer to every viewer and tell everyone the host is live."""
        if not self.is_host(host_id):
            logger.info("Ignoring announce-streaming from non-host {}", host_id)
            return False

        for viewer_id in self._viewers:
            self._notifier.send(host_id, SignalEvent.VIEWER_JOINED, {"viewerId": str(viewer_id)})
        self._notifier.broadcast(SignalEvent.HOST_STREAMING)
        logger.info("Host {} streaming to {} viewers", host_id, len(self._viewers))
        return True

    def host_stopped_streaming(self, host_id: ConnectionId) -> bool:
        if not self.is_host(host_id):
            logger.info("Ignoring host-stopped-streaming from non-host {}", host_id)
            return False

        for viewer_id in self._viewers:
            self._notifier.send(viewer_id, SignalEvent.HOST_STOPPED)
        logger.info("Host {} stopped streaming", host_id)
        return True

    def record_quality(self, viewer_id: ConnectionId, report: QualityReport) -> bool:
        if viewer_id not in self._viewers:
            return False
        self._quality[viewer_id] = report
        return True

    # ==================== INTERNALS ====================

    def _check_transition(self, connection: Connection, new: ConnectionRole) -> None:
        if not ConnectionRoleMachine.can_transition(connection.role, new):
            logger.warning(
                "Rejected role change for {}: {} -> {}", connection.connection_id, connection.role, new
            )
            raise InvalidRoleTransitionError(connection.connection_id, connection.role, new)

    def _set_role(self, connection_id: ConnectionId, role: ConnectionRole) -> None:
        connection = self._connections.get(connection_id)
        if connection is not None:
            connection.role = role

    def _host_left(self, host_id: ConnectionId) -> None:
        logger.info("Host {} left, releasing {} viewers", host_id, len(self._viewers))
        self._host_id = None
        self._set_role(host_id, ConnectionRole.UNSET)
        self._evict_viewers()

    def _viewer_left(self, viewer_id: ConnectionId) -> None:
        del self._viewers[viewer_id]
        self._quality.pop(viewer_id, None)
        self._set_role(viewer_id, ConnectionRole.UNSET)
        logger.info("Viewer {} left ({} remaining)", viewer_id, len(self._viewers))

        if self._host_id is not None:
            self._notifier.send(self._host_id, SignalEvent.VIEWER_LEFT, {"viewerId": str(viewer_id)})

    def _evict_viewers(self) -> None:
        for viewer_id in self._viewers:
            self._notifier.send(viewer_id, SignalEvent.HOST_LEFT)
            self._set_role(viewer_id, ConnectionRole.UNSET)
        self._viewers.clear()
        self._quality.clear()

    def _changed(self) -> None:
        for listener in self._listeners:
            listener()
