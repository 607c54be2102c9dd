"""WebSocket server for chat panels."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from aiohttp import WSMsgType, web

if TYPE_CHECKING:
    from ollachat.infrastructure.persistence.database import DatabaseManager
    from ollachat.presentation.bridge import PresentationBridge, Sender

logger = logging.getLogger(__name__)

# Factory type: builds one bridge for a connected panel
BridgeFactory = Callable[["Sender"], "PresentationBridge"]


class BridgeServer:
    """HTTP server exposing the presentation protocol.

    Provides /ws for chat panels (one PresentationBridge per connection),
    and /live and /ready for health probes. Envelope tasks outlive their
    connection, so an ask in flight still stores its reply after the panel
    disconnects; stop() cancels whatever is left.
    """

    def __init__(
        self,
        bridge_factory: BridgeFactory,
        db_manager: DatabaseManager,
        host: str = "127.0.0.1",
        port: int = 8765,
    ) -> None:
        """Initialize the server.

        Args:
            bridge_factory: Builds a bridge bound to a connection's sender.
            db_manager: DatabaseManager instance for readiness checks.
            host: Interface to listen on.
            port: Port to listen on. Use 0 for any available port.
        """
        self._bridge_factory = bridge_factory
        self._db_manager = db_manager
        self._host = host
        self._port = port
        self._actual_port = port
        self._server: web.AppRunner | None = None
        self._site: web.TCPSite | None = None
        self._running = False
        self._sockets: set[web.WebSocketResponse] = set()
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def is_running(self) -> bool:
        """Check if the server is running."""
        return self._running

    @property
    def port(self) -> int:
        """Get the port the server is listening on."""
        return self._actual_port

    @property
    def connection_count(self) -> int:
        return len(self._sockets)

    async def check_liveness(self) -> dict[str, Any]:
        """Check if the application is alive.

        Returns:
            Liveness status with timestamp.
        """
        return {
            "status": "alive" if self._running else "dead",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    async def check_readiness(self) -> dict[str, Any]:
        """Check if the application is ready to serve panels.

        Returns:
            Readiness status with component health details.
        """
        db_ok = await self._db_manager.is_healthy()
        return {
            "ready": self._running and db_ok,
            "server": self._running,
            "database": db_ok,
            "connections": len(self._sockets),
        }

    async def _handle_live(self, request: web.Request) -> web.Response:
        """Handle /live endpoint."""
        result = await self.check_liveness()
        return web.json_response(result)

    async def _handle_ready(self, request: web.Request) -> web.Response:
        """Handle /ready endpoint."""
        result = await self.check_readiness()
        status = 200 if result["ready"] else 503
        return web.json_response(result, status=status)

    async def _handle_ws(self, request: web.Request) -> web.WebSocketResponse:
        """Handle /ws endpoint: relay envelopes for one chat panel."""
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        self._sockets.add(ws)
        logger.info("Chat panel connected (%d open)", len(self._sockets))

        bridge = self._bridge_factory(ws.send_json)
        try:
            await bridge.open()
            async for msg in ws:
                if msg.type == WSMsgType.TEXT:
                    # Each envelope runs in its own task so a pending ask
                    # does not block getFiles and friends
                    task = asyncio.create_task(self._receive(bridge, msg.data))
                    self._tasks.add(task)
                    task.add_done_callback(self._tasks.discard)
                elif msg.type == WSMsgType.ERROR:
                    logger.warning("WebSocket error: %s", ws.exception())
        finally:
            bridge.close()
            self._sockets.discard(ws)
            logger.info("Chat panel disconnected (%d open)", len(self._sockets))

        return ws

    async def _receive(self, bridge: PresentationBridge, data: str) -> None:
        try:
            await bridge.receive(data)
        except ConnectionError:
            logger.info("Chat panel closed before the reply was delivered")
        except Exception:
            logger.exception("Error handling envelope")

    async def start(self) -> None:
        """Start the HTTP server."""
        app = web.Application()
        app.router.add_get("/live", self._handle_live)
        app.router.add_get("/ready", self._handle_ready)
        app.router.add_get("/ws", self._handle_ws)

        self._server = web.AppRunner(app)
        await self._server.setup()

        self._site = web.TCPSite(self._server, self._host, self._port)
        await self._site.start()

        # Get actual port (useful when port=0 for dynamic allocation)
        if self._site._server is not None:
            sockets = self._site._server.sockets  # type: ignore[union-attr]
            if sockets:
                self._actual_port = sockets[0].getsockname()[1]

        self._running = True
        logger.info("Bridge server started on %s:%d", self._host, self.port)

    async def stop(self) -> None:
        """Stop the HTTP server, closing panels and pending envelope tasks."""
        for ws in list(self._sockets):
            await ws.close()

        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        if self._server is not None:
            await self._server.cleanup()
            self._server = None
            self._site = None

        self._running = False
        logger.info("Bridge server stopped")
