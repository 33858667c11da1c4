"""Connection records owned by the connection registry."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from audiocast.domain.utils.idgen import new_connection_id


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class ConnectionId:
    """Opaque identifier of one live transport connection.

    Only the transport layer creates these; domain code compares and hashes them
    but never looks inside.
    """

    value: str

    @classmethod
    def new(cls) -> "ConnectionId":
        return cls(new_connection_id())

    def __str__(self) -> str:
        return self.value


class ConnectionRole(str, Enum):
    """Role of a connection.

    - UNSET: connected, neither broadcasting nor listening.
    - HOST: holds the single host slot.
    - VIEWER: member of the viewer set.
    """

    UNSET = "unset"
    HOST = "host"
    VIEWER = "viewer"

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class Connection:
    connection_id: ConnectionId
    role: ConnectionRole = ConnectionRole.UNSET
    created_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True, slots=True)
class ViewerEntry:
    created_at: datetime = field(default_factory=utc_now)


class QualityReport(BaseModel):
    """Latest listening-quality sample reported by a viewer."""

    rtt_ms: float | None = None
    jitter_ms: float | None = None
    bitrate_kbps: float | None = None
    loss_pct: float | None = None
    timestamp: datetime = Field(default_factory=utc_now)
