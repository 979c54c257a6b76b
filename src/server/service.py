from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar
from urllib.parse import urlsplit

import websockets
from websockets.asyncio.server import Server, ServerConnection, broadcast, serve
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from contracts.ui_protocol import EVENT_HELLO

from .config import HEALTHZ_PATH, ROOT_PATHS, UIServerConfig
from .events import ReplayCache, encode_event

T = TypeVar("T")
MessageHandler = Callable[[str], Any]

_TEXT = "text/plain; charset=utf-8"
_HTML = "text/html; charset=utf-8"
_NO_INDEX_BODY = b"FocusDev panel server. Connect a UI to the websocket at /ws.\n"


class UIServer:
    """Threaded asyncio server carrying panel events and UI control messages.

    Inbound messages and everything scheduled with `call_soon` run on the
    server loop, which is the single context the session clock lives on.
    """

    def __init__(
        self,
        config: UIServerConfig,
        logger: Optional[logging.Logger] = None,
        message_handler: Optional[MessageHandler] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("ui_server")
        self._message_handler = message_handler
        self._replay = ReplayCache()
        self._clients: set[ServerConnection] = set()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._ready: concurrent.futures.Future[None] = concurrent.futures.Future()
        self._shutdown: Optional[asyncio.Event] = None
        self._routes = self._build_routes()

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
    def loop(self) -> Optional[asyncio.AbstractEventLoop]:
        return self._loop

    @property
    def is_running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and self._ready.done()
            and self._ready.exception() is None
        )

    def set_message_handler(self, handler: Optional[MessageHandler]) -> None:
        self._message_handler = handler

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("UI server is already running")
            return

        self._ready = concurrent.futures.Future()
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._thread_main,
            args=(self._loop,),
            daemon=True,
            name="ui-server",
        )
        self._thread.start()

        try:
            self._ready.result(timeout=timeout_seconds)
        except concurrent.futures.TimeoutError as error:
            raise RuntimeError(
                f"UI server did not start within {timeout_seconds:.1f}s"
            ) from error
        except Exception as error:
            self._thread.join(timeout=timeout_seconds)
            self._thread = None
            self._loop = None
            raise RuntimeError(f"UI server startup failed: {error}") from error

    def stop(self, timeout_seconds: float = 5.0) -> None:
        thread, loop = self._thread, self._loop
        if thread is None:
            return

        if loop is not None and self._shutdown is not None and not loop.is_closed():
            loop.call_soon_threadsafe(self._shutdown.set)

        thread.join(timeout=timeout_seconds)
        if thread.is_alive():
            self._logger.error(
                "UI server thread did not stop within %.1fs",
                timeout_seconds,
            )

        self._thread = None
        self._loop = None
        self._shutdown = None

    def call_soon(self, callback: Callable[[], Any]) -> None:
        """Schedule `callback` on the server loop from any thread."""
        self._require_loop().call_soon_threadsafe(self._run_guarded, callback)

    def run_sync(self, callback: Callable[[], T], timeout_seconds: float = 5.0) -> T:
        """Run `callback` on the server loop and wait for its result."""
        loop = self._require_loop()

        async def _invoke() -> T:
            return callback()

        return asyncio.run_coroutine_threadsafe(_invoke(), loop).result(
            timeout=timeout_seconds
        )

    def publish(self, event_type: str, **payload: Any) -> None:
        """Encode an event, remember it for replay and fan it out."""
        frame = encode_event(event_type, payload)
        self._replay.record(event_type, frame)
        loop = self._loop
        if not self.is_running or loop is None:
            return
        try:
            loop.call_soon_threadsafe(self._broadcast, frame)
        except RuntimeError:
            # Loop closed during shutdown.
            self._logger.debug("Dropping %s event after shutdown", event_type)

    def _require_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None or self._loop.is_closed():
            raise RuntimeError("UI server loop is not running")
        return self._loop

    def _run_guarded(self, callback: Callable[[], Any]) -> None:
        try:
            callback()
        except Exception as error:
            self._logger.error("Scheduled callback failed: %s", error, exc_info=True)

    def _thread_main(self, loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        try:
            loop.run_until_complete(self._serve())
        except Exception as error:  # pragma: no cover - exercised manually
            self._logger.error("UI server failed: %s", error, exc_info=True)
            if not self._ready.done():
                self._ready.set_exception(error)
        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            if pending:
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            loop.close()

    async def _serve(self) -> None:
        self._shutdown = asyncio.Event()
        async with serve(
            self._handle_connection,
            host=self._config.host,
            port=self._config.port,
            process_request=self._process_request,
            logger=self._logger,
        ) as server:
            self._logger.info(
                "UI server running at http://%s:%d (websocket: %s)",
                self._config.host,
                self._config.port,
                self._config.websocket_path,
            )
            self._ready.set_result(None)
            await self._shutdown.wait()
            self._close(server)

    def _close(self, server: Server) -> None:
        self._logger.info("Closing %d UI connection(s)", len(self._clients))
        server.close(close_connections=True)
        self._clients.clear()
        # A restarted server replays only frames published after the restart.
        self._replay.clear()

    async def _handle_connection(self, websocket: ServerConnection) -> None:
        if urlsplit(websocket.request.path).path != self._config.websocket_path:
            await websocket.close(code=1008, reason="Invalid websocket path")
            return

        self._clients.add(websocket)
        self._logger.info("Client connected: %s", websocket.remote_address)
        try:
            await websocket.send(
                encode_event(EVENT_HELLO, {"message": "FocusDev panel connected"})
            )
            for frame in self._replay.replay():
                await websocket.send(frame)
            async for message in websocket:
                self._dispatch_inbound(message)
        except websockets.exceptions.ConnectionClosed:
            pass
        finally:
            self._clients.discard(websocket)
            self._logger.info("Client disconnected: %s", websocket.remote_address)

    def _dispatch_inbound(self, message: str | bytes) -> None:
        self._logger.debug("Received from UI: %s", message)
        handler = self._message_handler
        if handler is None:
            self._logger.warning("No panel attached; dropping UI message")
            return
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")
        self._run_guarded(lambda: handler(message))

    def _broadcast(self, frame: str) -> None:
        if self._clients:
            broadcast(self._clients, frame)

    def _build_routes(self) -> dict[str, tuple[bytes, str]]:
        if self._config.index_file:
            index = (Path(self._config.index_file).read_bytes(), _HTML)
        else:
            index = (_NO_INDEX_BODY, _TEXT)
        routes = {path: index for path in ROOT_PATHS}
        routes[HEALTHZ_PATH] = (b"ok\n", _TEXT)
        return routes

    def _process_request(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Response | None:
        del connection
        path = urlsplit(request.path).path
        if path == self._config.websocket_path:
            return None

        route = self._routes.get(path)
        if route is None:
            return _http_response(404, "Not Found", b"not found\n", _TEXT)
        body, content_type = route
        return _http_response(200, "OK", body, content_type)


def _http_response(status: int, reason: str, body: bytes, content_type: str) -> Response:
    headers = Headers()
    headers["Content-Type"] = content_type
    headers["Content-Length"] = str(len(body))
    headers["Cache-Control"] = "no-store"
    return Response(status, reason, headers, body)
