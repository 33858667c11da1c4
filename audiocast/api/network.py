"""LAN discovery and live stats endpoints."""

import socket
import time

import psutil
from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from audiocast.api.dependency import BroadcastServiceDep

router = APIRouter()


class CamelOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NetworkAddress(CamelOut):
    interface: str
    address: str
    url: str


class NetworkInfoOut(CamelOut):
    addresses: list[NetworkAddress]
    local_url: str


class StatsOut(CamelOut):
    viewer_count: int
    host_present: bool
    uptime: float


def list_lan_addresses(port: int) -> list[NetworkAddress]:
    """Non-loopback IPv4 addresses of this machine, one entry per interface address."""
    addresses = []
    for name, interface_addrs in psutil.net_if_addrs().items():
        for addr in interface_addrs:
            if addr.family != socket.AF_INET or addr.address.startswith("127."):
                continue
            addresses.append(
                NetworkAddress(
                    interface=name,
                    address=addr.address,
                    url=f"http://{addr.address}:{port}",
                )
            )
    return addresses


@router.get("/network-info", response_model_by_alias=True)
async def network_info(request: Request) -> NetworkInfoOut:
    port = request.app.state.settings.PORT
    return NetworkInfoOut(
        addresses=list_lan_addresses(port),
        local_url=f"http://localhost:{port}",
    )


@router.get("/stats", response_model_by_alias=True)
async def stats(request: Request, service: BroadcastServiceDep) -> StatsOut:
    snapshot = service.snapshot()
    return StatsOut(
        viewer_count=snapshot.viewer_count,
        host_present=snapshot.host_present,
        uptime=round(time.monotonic() - request.app.state.started_at, 3),
    )
