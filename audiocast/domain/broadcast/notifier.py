from typing import Any, Protocol

from audiocast.schemas import ConnectionId


class Notifier(Protocol):
    """Outbound side of the transport as seen by the broadcast domain.

    Both methods only enqueue and must never block. `send` returns False when the
    target is not attached to the transport, in which case nothing is delivered.
    """

    def send(self, connection_id: ConnectionId, event: str, data: Any = None) -> bool: ...

    def broadcast(self, event: str, data: Any = None) -> int: ...
