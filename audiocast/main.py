import sys
import time
import traceback
import uuid
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from granian import Granian
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from audiocast.api.errors import app_error_handler
from audiocast.api.pages import STATIC_DIR
from audiocast.app_config import AppEnvironConfig, get_app_environ_config
from audiocast.domain.access.access_gate import AccessGate
from audiocast.domain.access.session_store import SessionStore
from audiocast.domain.broadcast.broadcast_domain import BroadcastService
from audiocast.services.connection_hub import ConnectionHub
from audiocast.shared.api.errors import E_INTERNAL
from audiocast.shared.api.utils import (
    api_failure,
    init_logger,
    load_routes,
    validation_exception_handler,
)
from audiocast.utils.app_errors import AppError
from audiocast.workers.session_sweeper import SessionSweeper


class HTTPLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore
        start_time = time.time()
        request_id = str(uuid.uuid4())[:8]

        logger.info(f"[{request_id}] {request.method} {request.url.path}")

        try:
            response = await call_next(request)

            process_time = (time.time() - start_time) * 1000

            logger.info(
                f"[{request_id}] {request.method} {request.url.path} - "
                f"Status: {response.status_code} - "
                f"Duration: {process_time:.2f}ms"
            )

            return response

        except Exception as exc:
            process_time = (time.time() - start_time) * 1000

            logger.error(
                f"[{request_id}] Unhandled exception in {request.method} {request.url.path} - "
                f"Duration: {process_time:.2f}ms - "
                f"Error: {type(exc).__name__}: {exc}\n"
                f"Traceback:\n{traceback.format_exc()}"
            )

            failure = api_failure(
                errcode=E_INTERNAL,
                errmesg=f"Internal server error (request_id: {request_id})",
            )
            return ORJSONResponse(
                status_code=500,
                content=failure.model_dump(),
            )


@asynccontextmanager
async def lifespan(server: FastAPI):
    init_logger()

    logger.info("Application startup...")

    settings: AppEnvironConfig = server.state.settings
    sweeper = SessionSweeper(server.state.session_store, settings.SESSION_SWEEP_INTERVAL_SECONDS)
    sweeper.start()
    server.state.session_sweeper = sweeper

    yield

    logger.info("Application shutdown...")

    await sweeper.stop()
    await server.state.hub.close_all()


def create_app(settings: AppEnvironConfig | None = None) -> FastAPI:
    """Build the application with a fresh registry, hub and session store."""
    settings = settings or get_app_environ_config()

    server = FastAPI(
        version="1.0",
        title="LAN Audio Cast",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    hub = ConnectionHub()
    session_store = SessionStore(max_age=timedelta(seconds=settings.SESSION_MAX_AGE_SECONDS))

    server.state.settings = settings
    server.state.started_at = time.monotonic()
    server.state.hub = hub
    server.state.broadcast_service = BroadcastService(hub)
    server.state.session_store = session_store
    server.state.access_gate = AccessGate(session_store)

    server.add_middleware(HTTPLoggingMiddleware)

    server.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.API_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    server.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore
    server.add_exception_handler(AppError, app_error_handler)  # type: ignore

    load_routes(server)
    server.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    return server


app = create_app()


def build_granian_kwargs(settings: AppEnvironConfig):
    return {
        "interface": "asgi",
        "address": settings.HOST,
        "port": settings.PORT,
        # Registry state lives in this process, so exactly one worker.
        "workers": 1,
        "reload": settings.DEBUG,
    }


def main():
    settings = get_app_environ_config()
    init_logger()
    logger.info("LAN Audio Cast listening on http://localhost:{}", settings.PORT)

    try:
        Granian("audiocast.main:app", **build_granian_kwargs(settings)).serve()
    except OSError as exc:
        logger.critical("Cannot start server on {}:{}: {}", settings.HOST, settings.PORT, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
