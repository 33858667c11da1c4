"""In-memory TTL table of host-page sessions."""

from collections.abc import Callable
from datetime import datetime, timedelta

from loguru import logger

from audiocast.domain.utils.idgen import new_host_session_id
from audiocast.schemas import HostSession, SessionRole, utc_now


class SessionStore:
    """Ephemeral sessions granting access to the host page.

    Entries expire `max_age` after creation. Lookups never return an expired
    entry; `sweep` physically removes them. Nothing survives a restart.
    """

    def __init__(
        self,
        max_age: timedelta,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.max_age = max_age
        self._clock = clock
        self._sessions: dict[str, HostSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return self.get(session_id) is not None

    def create(self, role: SessionRole = SessionRole.HOST) -> HostSession:
        session = HostSession(
            session_id=new_host_session_id(),
            role=role,
            created_at=self._clock(),
        )
        self._sessions[session.session_id] = session
        logger.info("Session {} created with role {}", session.session_id[:10], role)
        return session

    def get(self, session_id: str | None) -> HostSession | None:
        if not session_id:
            return None

        session = self._sessions.get(session_id)
        if session is None:
            return None
        if session.is_expired(self._clock(), self.max_age):
            return None
        return session

    def revoke(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def expires_at(self, session: HostSession) -> datetime:
        return session.expires_at(self.max_age)

    def sweep(self, now: datetime | None = None) -> int:
        """Remove every expired session and return how many were removed."""
        now = now or self._clock()
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if session.is_expired(now, self.max_age)
        ]
        for session_id in expired:
            self._sessions.pop(session_id, None)

        if expired:
            logger.info("Swept {} expired sessions ({} remaining)", len(expired), len(self._sessions))
        return len(expired)
