"""
=============================================================================
FILE HTTP SERVER
=============================================================================

Glues the pieces together into a runnable server.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer.accept()                                             │
    │        │                                                             │
    │        ▼                                                             │
    │   ThreadPoolExecutor ─── worker: _process_connection(conn)          │
    │        │                                                             │
    │        │   ┌─── keep-alive loop ──────────────────────────────────┐ │
    │        │   │ conn.read_request()                                  │ │
    │        │   │ RequestParser.parse()         → 400/405/413/505      │ │
    │        │   │ middleware → Router.handle()                         │ │
    │        │   │              └─ StaticFileHandler.respond()          │ │
    │        │   │                   200 / 206 / 302 / 404 / 500        │ │
    │        │   │ exception in handler          → 500                  │ │
    │        │   │ conn.send_response()          (no body for HEAD)     │ │
    │        │   └──────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
USAGE
=============================================================================

    server = FileHTTPServer(ServerConfig(port=8080))
    server.use(LoggingMiddleware())
    server.mount("/static", serve_static("./public"))
    server.run()     # blocks until Ctrl+C / SIGTERM

=============================================================================
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Callable, Tuple

from .config import ServerConfig
from .core import SocketServer, Connection, RequestTooLargeError
from .handlers.static import StaticFileHandler
from .http import (
    HTTPRequest, RequestParser, HTTPParseError,
    HTTPResponse, ResponseBuilder, HTTPStatus,
    Router,
)
from .middleware import MiddlewarePipeline, Middleware


logger = logging.getLogger(__name__)


class FileHTTPServer:
    """
    Threaded HTTP/1.1 server for static files.

        server = FileHTTPServer()
        server.mount("/", serve_static("/var/www"))

        @server.get("/health")
        def health(request):
            return ResponseBuilder().json({"status": "ok"}).build()

        server.run()
    """

    SERVED_METHODS = ("GET", "HEAD")

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._executor: Optional[ThreadPoolExecutor] = None
        self._parser = RequestParser(max_request_size=self.config.max_request_size)

        self._router = Router()
        self._middleware = MiddlewarePipeline()

        # middleware.wrap(router.handle), built in run()
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None
        self._running = False

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def use(self, middleware: Middleware) -> "FileHTTPServer":
        """Add middleware; the first added is the outermost."""
        self._middleware.add(middleware)
        return self

    @property
    def router(self) -> Router:
        return self._router

    def route(self, path: str, method: Optional[str] = None):
        return self._router.route(path, method)

    def get(self, path: str):
        return self._router.get(path)

    def head(self, path: str):
        return self._router.head(path)

    def mount(self, prefix: str, handler: StaticFileHandler) -> "FileHTTPServer":
        """
        Serve a StaticFileHandler under a URL prefix.

        Registers GET and HEAD for:

            /static           → 302 to /static/ (the root is a directory)
            /static/          → index file
            /static/*path     → files

        Requests the handler declines are answered with 404.
        """
        prefix = "/" + prefix.strip("/")

        for method in self.SERVED_METHODS:
            self._router.add_route(prefix, handler.respond, method)
            if prefix == "/":
                self._router.add_route("/*path", handler.respond, method)
            else:
                self._router.add_route(f"{prefix}/*path", handler.respond, method)

        logger.info(f"Mounted {handler.config.serving_root} at {prefix}")
        return self

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port once running with port=0."""
        return self._socket_server.address

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server accepts connections."""
        return self._socket_server.wait_until_ready(timeout)

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Start the server and block until it is stopped.

        Args:
            host: Override config host.
            port: Override config port.
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        self._setup_logging()

        self._handler = self._middleware.wrap(self._router.handle)
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="fileserver-worker",
        )
        self._running = True

        for route in self._router.routes():
            logger.debug(f"Route: {route.method or 'ANY':8} {route.path}")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def stop(self):
        """Ask a running server to stop; run() returns once it has."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("fileserver").setLevel(level)

    def _shutdown(self):
        logger.info("Shutting down server...")
        self._running = False

        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

        logger.info("Server stopped")

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Hand a new connection to a worker thread."""
        try:
            self._executor.submit(self._process_connection, conn)
        except RuntimeError:
            # Executor already shut down
            logger.warning(f"[{conn.id}] Server shutting down, rejecting connection")
            self._send_error(conn, HTTPStatus.SERVICE_UNAVAILABLE, "Server shutting down")
            conn.close()

    def _process_connection(self, conn: Connection):
        """Serve requests on one connection until it closes (worker thread)."""
        with conn:
            while self._running:
                try:
                    raw_request = conn.read_request()
                    if raw_request is None:
                        break

                    try:
                        request = self._parser.parse(raw_request, conn.address)
                    except HTTPParseError as e:
                        self._send_error(conn, HTTPStatus(e.status_code), str(e))
                        break

                    response = self._dispatch(conn, request)
                    keep_alive = request.is_keep_alive and self.config.keep_alive

                    if keep_alive:
                        response.headers.setdefault("Connection", "keep-alive")
                        response.headers.setdefault(
                            "Keep-Alive", f"timeout={int(self.config.keep_alive_timeout)}"
                        )
                    else:
                        response.headers["Connection"] = "close"

                    response_bytes = response.to_bytes(
                        self.config.server_name,
                        include_body=request.method != "HEAD",
                    )
                    if not conn.send_response(response_bytes):
                        break

                    if not keep_alive:
                        break
                    conn.set_keep_alive()

                except TimeoutError:
                    self._send_error(conn, HTTPStatus.REQUEST_TIMEOUT, "Request timeout")
                    break
                except RequestTooLargeError as e:
                    self._send_error(conn, HTTPStatus.PAYLOAD_TOO_LARGE, str(e))
                    break
                except Exception as e:
                    logger.exception(f"[{conn.id}] Connection error: {e}")
                    break

    def _dispatch(self, conn: Connection, request: HTTPRequest) -> HTTPResponse:
        """Run middleware and router; any exception becomes a 500."""
        try:
            return self._handler(request)
        except Exception as e:
            logger.exception(f"[{conn.id}] Handler error: {e}")
            return (ResponseBuilder()
                .status(HTTPStatus.INTERNAL_SERVER_ERROR)
                .json({"error": "Internal Server Error"})
                .build())

    def _send_error(self, conn: Connection, status: HTTPStatus, message: str):
        """Answer errors that happen before a handler runs."""
        response = (ResponseBuilder()
            .status(status)
            .json({"error": message})
            .close_connection()
            .build())
        conn.send_response(response.to_bytes(self.config.server_name))
