"""Host control page (gated) and listener page (public)."""

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, RedirectResponse
from loguru import logger

from audiocast.api.dependency import AccessGateDep, get_client_host, get_session_token

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
HOST_PAGE = STATIC_DIR / "index.html"
LISTEN_PAGE = STATIC_DIR / "listen.html"

router = APIRouter()


@router.get("/", response_model=None)
async def host_page(request: Request, gate: AccessGateDep) -> FileResponse | RedirectResponse:
    """Serve the host page to loopback clients and host-session holders.

    Everyone else is sent to the listener page.
    """
    client_host = get_client_host(request)
    decision = gate.check(client_host, get_session_token(request))
    if not decision.allowed:
        return RedirectResponse(url="/listen", status_code=302)

    logger.debug("Host page served to {} ({})", client_host, decision.value)
    return FileResponse(HOST_PAGE)


@router.get("/listen")
async def listen_page() -> FileResponse:
    return FileResponse(LISTEN_PAGE)
