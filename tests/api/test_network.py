"""Tests for /network-info and /stats."""

import socket
from types import SimpleNamespace

import psutil

from audiocast.api.network import list_lan_addresses
from audiocast.schemas import ConnectionId


def _fake_interfaces():
    return {
        "lo": [SimpleNamespace(family=socket.AF_INET, address="127.0.0.1")],
        "eth0": [
            SimpleNamespace(family=socket.AF_INET, address="192.168.1.10"),
            SimpleNamespace(family=socket.AF_INET6, address="fe80::1"),
        ],
        "wlan0": [SimpleNamespace(family=socket.AF_INET, address="10.0.0.7")],
    }


class TestListLanAddresses:
    def test_only_non_loopback_ipv4(self, monkeypatch):
        monkeypatch.setattr(psutil, "net_if_addrs", _fake_interfaces)

        addresses = list_lan_addresses(3000)

        assert [(a.interface, a.address) for a in addresses] == [
            ("eth0", "192.168.1.10"),
            ("wlan0", "10.0.0.7"),
        ]
        assert addresses[0].url == "http://192.168.1.10:3000"

    def test_no_interfaces(self, monkeypatch):
        monkeypatch.setattr(psutil, "net_if_addrs", lambda: {})

        assert list_lan_addresses(3000) == []


class TestNetworkInfoRoute:
    async def test_network_info_lists_urls(self, client, monkeypatch):
        monkeypatch.setattr(psutil, "net_if_addrs", _fake_interfaces)

        response = await client.get("/network-info")

        assert response.status_code == 200
        body = response.json()
        assert body["localUrl"] == "http://localhost:3000"
        assert body["addresses"][0] == {
            "interface": "eth0",
            "address": "192.168.1.10",
            "url": "http://192.168.1.10:3000",
        }


class TestStatsRoute:
    async def test_stats_without_host(self, lan_client):
        response = await lan_client.get("/stats")

        assert response.status_code == 200
        body = response.json()
        assert body["viewerCount"] == 0
        assert body["hostPresent"] is False
        assert body["uptime"] >= 0

    async def test_stats_reflect_registry(self, lan_client, test_app):
        service = test_app.state.broadcast_service
        service.register_host(ConnectionId("cn_host"))
        service.viewer_join(ConnectionId("cn_v1"))
        service.viewer_join(ConnectionId("cn_v2"))

        body = (await lan_client.get("/stats")).json()

        assert body["viewerCount"] == 2
        assert body["hostPresent"] is True
