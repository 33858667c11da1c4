from typing import Annotated
from urllib.parse import urlsplit

from fastapi import Depends, Request

from audiocast.domain.access.access_gate import AccessGate, is_loopback
from audiocast.domain.access.session_store import SessionStore
from audiocast.domain.broadcast.broadcast_domain import BroadcastService
from audiocast.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

SESSION_HEADER = "X-Host-Session"


def get_broadcast_service(request: Request) -> BroadcastService:
    return request.app.state.broadcast_service


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_access_gate(request: Request) -> AccessGate:
    return request.app.state.access_gate


def get_client_host(request: Request) -> str | None:
    return request.client.host if request.client else None


def get_session_token(request: Request) -> str | None:
    cookie_name = request.app.state.settings.SESSION_COOKIE_NAME
    return request.cookies.get(cookie_name) or request.headers.get(SESSION_HEADER)


async def require_loopback(request: Request) -> None:
    """Only the host machine itself, and only pages it serves, may call this route.

    A browser on the host machine is a loopback peer for every site it has open,
    so a present `Origin` must name a loopback host too.
    """
    client_host = get_client_host(request)
    if not is_loopback(client_host):
        raise AppError(
            errcode=AppErrorCode.E_NOT_LOOPBACK,
            errmesg=f"Only available from the host machine, got {client_host}",
            status_code=HttpStatusCode.FORBIDDEN,
        )

    origin = request.headers.get("origin")
    if origin is not None and not is_loopback(urlsplit(origin).hostname):
        raise AppError(
            errcode=AppErrorCode.E_NOT_LOOPBACK,
            errmesg=f"Cross-origin request from {origin} refused",
            status_code=HttpStatusCode.FORBIDDEN,
        )


BroadcastServiceDep = Annotated[BroadcastService, Depends(get_broadcast_service)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
AccessGateDep = Annotated[AccessGate, Depends(get_access_gate)]
