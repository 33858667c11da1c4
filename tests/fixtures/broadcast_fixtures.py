"""In-memory fixtures for the broadcast domain."""

from dataclasses import dataclass
from typing import Any

import pytest

from audiocast.domain.broadcast.broadcast_domain import BroadcastService
from audiocast.schemas import ConnectionId


@dataclass
class SentMessage:
    connection_id: ConnectionId
    event: str
    data: Any


class RecordingNotifier:
    """Notifier that records every message instead of writing to sockets.

    Ids in `detached` behave like sockets that closed: sends to them return
    False and are not recorded.
    """

    def __init__(self) -> None:
        self.sent: list[SentMessage] = []
        self.broadcasts: list[tuple[str, Any]] = []
        self.detached: set[ConnectionId] = set()

    def send(self, connection_id: ConnectionId, event: str, data: Any = None) -> bool:
        if connection_id in self.detached:
            return False
        self.sent.append(SentMessage(connection_id, str(event), data))
        return True

    def broadcast(self, event: str, data: Any = None) -> int:
        self.broadcasts.append((str(event), data))
        return 1

    def events_for(self, connection_id: ConnectionId) -> list[tuple[str, Any]]:
        return [(m.event, m.data) for m in self.sent if m.connection_id == connection_id]

    def stats(self) -> list[Any]:
        return [data for event, data in self.broadcasts if event == "stats"]

    def clear(self) -> None:
        self.sent.clear()
        self.broadcasts.clear()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def service(notifier: RecordingNotifier) -> BroadcastService:
    return BroadcastService(notifier)


@pytest.fixture
def registry(service: BroadcastService):
    return service.registry


@pytest.fixture
def host_id() -> ConnectionId:
    return ConnectionId("cn_host_a")


@pytest.fixture
def viewer_id() -> ConnectionId:
    return ConnectionId("cn_viewer_b")
