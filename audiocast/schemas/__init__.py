from .connection import (
    Connection,
    ConnectionId,
    ConnectionRole,
    QualityReport,
    ViewerEntry,
    utc_now,
)
from .host_session import HostSession, SessionRole

__all__ = [
    "Connection",
    "ConnectionId",
    "ConnectionRole",
    "HostSession",
    "QualityReport",
    "SessionRole",
    "ViewerEntry",
    "utc_now",
]
