"""Decides who may open the host control page.

This is a coarse origin/token check, not authentication: a loopback peer is
trusted outright and anyone else needs a live host session id.
"""

import ipaddress
from enum import Enum

from loguru import logger

from audiocast.schemas import SessionRole

from .session_store import SessionStore


LOOPBACK_HOSTNAMES = {"localhost"}


class AccessDecision(str, Enum):
    ALLOW_LOOPBACK = "allow-loopback"
    ALLOW_SESSION = "allow-session"
    REDIRECT = "redirect"

    @property
    def allowed(self) -> bool:
        return self is not AccessDecision.REDIRECT


def is_loopback(client_host: str | None) -> bool:
    """True for 127.0.0.0/8, ::1, IPv4-mapped loopback and the name `localhost`."""
    if not client_host:
        return False

    host = client_host.strip().lower()
    if host in LOOPBACK_HOSTNAMES:
        return True

    try:
        address = ipaddress.ip_address(host.strip("[]").split("%", 1)[0])
    except ValueError:
        return False

    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        return address.ipv4_mapped.is_loopback
    return address.is_loopback


class AccessGate:
    def __init__(self, session_store: SessionStore):
        self._sessions = session_store

    def check(self, client_host: str | None, session_id: str | None = None) -> AccessDecision:
        if is_loopback(client_host):
            return AccessDecision.ALLOW_LOOPBACK

        session = self._sessions.get(session_id)
        if session is not None and session.role == SessionRole.HOST:
            return AccessDecision.ALLOW_SESSION

        logger.debug("Host page denied for {}, redirecting", client_host)
        return AccessDecision.REDIRECT
