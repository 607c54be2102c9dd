"""Tests for BridgeServer."""

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import aiohttp
import pytest

from ollachat.infrastructure.http import BridgeServer


class FakeBridge:
    """Bridge stand-in that echoes envelopes back to the panel."""

    def __init__(self, send: Any) -> None:
        self.send = send
        self.opened = False
        self.closed = False
        self.received: list[str] = []
        self.completed: list[str] = []
        self.release = asyncio.Event()

    async def open(self) -> None:
        self.opened = True
        await self.send({"type": "hello"})

    def close(self) -> None:
        self.closed = True

    async def receive(self, data: str) -> None:
        self.received.append(data)
        if data == "boom":
            raise RuntimeError("handler failed")
        if data == "slow":
            await self.release.wait()
        self.completed.append(data)
        await self.send({"type": "echo", "data": data})


@pytest.fixture
def mock_db_manager() -> AsyncMock:
    """Create a mock DatabaseManager."""
    mock = AsyncMock()
    mock.is_healthy = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def bridges() -> list[FakeBridge]:
    return []


@pytest.fixture
async def server(mock_db_manager: AsyncMock, bridges: list[FakeBridge]):
    """Start a server on any available port."""

    def factory(send: Any) -> FakeBridge:
        bridge = FakeBridge(send)
        bridges.append(bridge)
        return bridge

    server = BridgeServer(factory, mock_db_manager, host="127.0.0.1", port=0)
    await server.start()
    yield server
    await server.stop()


def _url(server: BridgeServer, path: str) -> str:
    return f"http://127.0.0.1:{server.port}{path}"


class TestBridgeServerHealth:
    """Tests for /live and /ready."""

    async def test_live(self, server: BridgeServer) -> None:
        async with aiohttp.ClientSession() as session:
            async with session.get(_url(server, "/live")) as response:
                assert response.status == 200
                data = await response.json()

        assert data["status"] == "alive"
        assert "timestamp" in data

    async def test_ready(self, server: BridgeServer) -> None:
        async with aiohttp.ClientSession() as session:
            async with session.get(_url(server, "/ready")) as response:
                assert response.status == 200
                data = await response.json()

        assert data == {
            "ready": True,
            "server": True,
            "database": True,
            "connections": 0,
        }

    async def test_not_ready_when_database_unhealthy(
        self, server: BridgeServer, mock_db_manager: AsyncMock
    ) -> None:
        mock_db_manager.is_healthy.return_value = False

        async with aiohttp.ClientSession() as session:
            async with session.get(_url(server, "/ready")) as response:
                assert response.status == 503
                data = await response.json()

        assert data["ready"] is False
        assert data["database"] is False

    async def test_liveness_before_start(self, mock_db_manager: AsyncMock) -> None:
        server = BridgeServer(FakeBridge, mock_db_manager, port=0)

        result = await server.check_liveness()

        assert result["status"] == "dead"
        assert server.is_running is False


class TestBridgeServerWebSocket:
    """Tests for /ws."""

    async def test_relay(self, server: BridgeServer, bridges: list[FakeBridge]) -> None:
        async with aiohttp.ClientSession() as session:
            async with session.ws_connect(_url(server, "/ws")) as ws:
                hello = await ws.receive_json(timeout=5)
                await ws.send_str('{"type": "getFiles"}')
                echo = await ws.receive_json(timeout=5)
                assert server.connection_count == 1

        assert hello == {"type": "hello"}
        assert echo == {"type": "echo", "data": '{"type": "getFiles"}'}
        assert bridges[0].opened is True

    async def test_handler_error_keeps_connection(
        self, server: BridgeServer
    ) -> None:
        async with aiohttp.ClientSession() as session:
            async with session.ws_connect(_url(server, "/ws")) as ws:
                await ws.receive_json(timeout=5)
                await ws.send_str("boom")
                await ws.send_str("after")
                echo = await ws.receive_json(timeout=5)

        assert echo == {"type": "echo", "data": "after"}

    async def test_bridge_closed_on_disconnect(
        self, server: BridgeServer, bridges: list[FakeBridge]
    ) -> None:
        async with aiohttp.ClientSession() as session:
            async with session.ws_connect(_url(server, "/ws")) as ws:
                await ws.receive_json(timeout=5)

        for _ in range(50):
            if bridges[0].closed:
                break
            await asyncio.sleep(0.01)

        assert bridges[0].closed is True
        assert server.connection_count == 0

    async def test_one_bridge_per_connection(
        self, server: BridgeServer, bridges: list[FakeBridge]
    ) -> None:
        async with aiohttp.ClientSession() as session:
            async with session.ws_connect(_url(server, "/ws")) as first:
                async with session.ws_connect(_url(server, "/ws")) as second:
                    await first.receive_json(timeout=5)
                    await second.receive_json(timeout=5)
                    assert server.connection_count == 2

        assert len(bridges) == 2

    async def test_pending_envelope_finishes_after_disconnect(
        self, server: BridgeServer, bridges: list[FakeBridge]
    ) -> None:
        """Test that a slow envelope still completes once the panel is gone."""
        async with aiohttp.ClientSession() as session:
            async with session.ws_connect(_url(server, "/ws")) as ws:
                await ws.receive_json(timeout=5)
                await ws.send_str("slow")
                for _ in range(50):
                    if bridges[0].received:
                        break
                    await asyncio.sleep(0.01)

        for _ in range(50):
            if bridges[0].closed:
                break
            await asyncio.sleep(0.01)
        assert bridges[0].closed is True
        assert bridges[0].completed == []

        bridges[0].release.set()
        for _ in range(50):
            if bridges[0].completed:
                break
            await asyncio.sleep(0.01)

        assert bridges[0].completed == ["slow"]

    async def test_stop_cancels_pending_envelopes(
        self, mock_db_manager: AsyncMock, bridges: list[FakeBridge]
    ) -> None:
        def factory(send: Any) -> FakeBridge:
            bridge = FakeBridge(send)
            bridges.append(bridge)
            return bridge

        server = BridgeServer(factory, mock_db_manager, host="127.0.0.1", port=0)
        await server.start()
        async with aiohttp.ClientSession() as session:
            async with session.ws_connect(_url(server, "/ws")) as ws:
                await ws.receive_json(timeout=5)
                await ws.send_str("slow")
                for _ in range(50):
                    if bridges[0].received:
                        break
                    await asyncio.sleep(0.01)

        await server.stop()
        bridges[0].release.set()
        await asyncio.sleep(0.05)

        assert bridges[0].completed == []
        assert server.is_running is False
