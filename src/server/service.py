"""Background websocket server pushing timer events and accepting command frames."""

from __future__ import annotations

import asyncio
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

from websockets.asyncio.server import ServerConnection, broadcast, serve
from websockets.exceptions import ConnectionClosed
from websockets.http11 import Request, Response

from contracts.ui_protocol import EVENT_ERROR, EVENT_HELLO, EVENT_STATE_UPDATE, STATE_ERROR

from .config import UIServerConfig
from .events import StickyEventStore, decode_message, make_event
from .routes import route_request

CommandHandler = Callable[[dict[str, Any]], None]

_CLOSE_GOING_AWAY = 1001
_CLOSE_POLICY_VIOLATION = 1008


class UIServer:
    """Runs an asyncio websocket server on a daemon thread.

    `publish` is safe to call from any thread. The latest sticky events are
    kept even while the server is stopped and replayed to every new client.
    """

    def __init__(
        self,
        config: UIServerConfig,
        logger: Optional[logging.Logger] = None,
        *,
        command_handler: Optional[CommandHandler] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("ui_server")
        self._command_handler = command_handler
        self._index_html = Path(config.index_file).read_bytes()
        self._sticky_events = StickyEventStore()
        self._clients: set[ServerConnection] = set()

        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._shutdown: Optional[asyncio.Event] = None
        self._ready = threading.Event()
        self._startup_error: Optional[BaseException] = None

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def websocket_path(self) -> str:
        return self._config.websocket_path

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and self._loop is not None

    def set_command_handler(self, handler: Optional[CommandHandler]) -> None:
        self._command_handler = handler

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("UI server is already running")
            return

        self._ready.clear()
        self._startup_error = None
        self._thread = threading.Thread(target=self._thread_main, name="ui-server", daemon=True)
        self._thread.start()

        if not self._ready.wait(timeout_seconds):
            raise RuntimeError(f"UI server did not start within {timeout_seconds:.1f}s")
        if self._startup_error is not None:
            raise RuntimeError(f"UI server startup failed: {self._startup_error}")

    def stop(self, timeout_seconds: float = 5.0) -> None:
        thread = self._thread
        if thread is None:
            return

        loop, shutdown = self._loop, self._shutdown
        if loop is not None and shutdown is not None:
            try:
                loop.call_soon_threadsafe(shutdown.set)
            except RuntimeError:
                # Loop already closed.
                pass

        thread.join(timeout=timeout_seconds)
        if thread.is_alive():
            self._logger.error("UI server thread did not stop within %.1fs", timeout_seconds)
        self._thread = None

    def publish_state(self, state: str, *, message: Optional[str] = None, **payload: Any) -> None:
        if message:
            payload["message"] = message
        self.publish(EVENT_STATE_UPDATE, state=state, **payload)

    def publish(self, event_type: str, **payload: Any) -> None:
        message = make_event(event_type, **payload)
        self._sticky_events.remember(event_type, message)

        loop = self._loop
        if loop is None:
            return
        try:
            loop.call_soon_threadsafe(self._broadcast, message)
        except RuntimeError:
            # Loop is shutting down; the sticky copy is enough.
            pass

    def handle_incoming(self, raw: str | bytes) -> Optional[str]:
        """Forward a decoded command frame; returns error text for bad frames."""
        payload = decode_message(raw)
        if payload is None:
            return "Command frames must be JSON objects"
        if self._command_handler is None:
            return "Commands are not accepted by this server"
        self._command_handler(payload)
        return None

    def _thread_main(self) -> None:
        try:
            asyncio.run(self._serve())
        except Exception as error:  # pragma: no cover - exercised manually
            self._startup_error = error
            self._logger.error("UI server failed: %s", error, exc_info=True)
        finally:
            self._loop = None
            self._shutdown = None
            self._ready.set()

    async def _serve(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._shutdown = asyncio.Event()
        async with serve(
            self._handle_connection,
            self._config.host,
            self._config.port,
            process_request=self._process_request,
            logger=self._logger,
        ):
            self._logger.info(
                "UI server listening on http://%s:%d (websocket: %s)",
                self._config.host,
                self._config.port,
                self._config.websocket_path,
            )
            self._ready.set()
            await self._shutdown.wait()
            await self._disconnect_all()

    async def _handle_connection(self, websocket: ServerConnection) -> None:
        path = urlsplit(websocket.request.path).path if websocket.request else ""
        if path != self._config.websocket_path:
            await websocket.close(code=_CLOSE_POLICY_VIOLATION, reason="Invalid websocket path")
            return

        self._clients.add(websocket)
        self._logger.info("Client connected: %s", websocket.remote_address)
        try:
            await websocket.send(make_event(EVENT_HELLO, message="UI websocket connected"))
            for sticky in self._sticky_events.snapshot():
                await websocket.send(sticky)
            async for frame in websocket:
                self._logger.debug("Command frame from UI: %s", frame)
                error = self.handle_incoming(frame)
                if error:
                    await websocket.send(make_event(EVENT_ERROR, state=STATE_ERROR, message=error))
        except ConnectionClosed:
            self._logger.info("Client disconnected: %s", websocket.remote_address)
        finally:
            self._clients.discard(websocket)

    def _process_request(self, connection: ServerConnection, request: Request) -> Optional[Response]:
        del connection
        return route_request(
            urlsplit(request.path).path,
            index_html=self._index_html,
            websocket_path=self._config.websocket_path,
        )

    def _broadcast(self, message: str) -> None:
        if self._clients:
            broadcast(self._clients, message)

    async def _disconnect_all(self) -> None:
        clients = tuple(self._clients)
        self._clients.clear()
        await asyncio.gather(
            *(client.close(code=_CLOSE_GOING_AWAY, reason="Server shutting down") for client in clients),
            return_exceptions=True,
        )
