from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel


class SessionRole(str, Enum):
    HOST = "host"
    VIEWER = "viewer"

    def __str__(self) -> str:
        return self.value


class HostSession(BaseModel):
    """Time-limited grant for the host control page."""

    session_id: str
    role: SessionRole
    created_at: datetime

    def expires_at(self, max_age: timedelta) -> datetime:
        return self.created_at + max_age

    def is_expired(self, now: datetime, max_age: timedelta) -> bool:
        return now >= self.expires_at(max_age)
