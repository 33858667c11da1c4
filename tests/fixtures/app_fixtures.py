"""FastAPI app and HTTP client fixtures."""

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from audiocast.app_config import AppEnvironConfig
from audiocast.main import create_app

LAN_CLIENT = ("192.168.1.20", 50123)


@pytest.fixture
def app_settings() -> AppEnvironConfig:
    return AppEnvironConfig(
        PORT=3000,
        SESSION_MAX_AGE_SECONDS=600,
        SESSION_SWEEP_INTERVAL_SECONDS=60,
        SESSION_COOKIE_NAME="audiocast_session",
    )


@pytest.fixture
def test_app(app_settings: AppEnvironConfig) -> FastAPI:
    return create_app(app_settings)


@pytest_asyncio.fixture
async def client(test_app: FastAPI):
    """HTTP client connecting from the loopback address."""
    transport = ASGITransport(app=test_app, client=("127.0.0.1", 50000))  # type: ignore[arg-type]
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def lan_client(test_app: FastAPI):
    """HTTP client connecting from another device on the LAN."""
    transport = ASGITransport(app=test_app, client=LAN_CLIENT)  # type: ignore[arg-type]
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
