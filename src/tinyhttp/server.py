"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together: the socket server accepts, a fresh thread per
connection reads one request, parses it, routes it through the middleware
pipeline, writes the response and closes.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    HTTP SERVER ARCHITECTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │                        ┌─────────────────┐                          │
    │                        │   HTTPServer    │                          │
    │                        │  (Orchestrator) │                          │
    │                        └────────┬────────┘                          │
    │                                 │                                    │
    │            ┌────────────────────┼────────────────────┐              │
    │            │                    │                    │              │
    │            ▼                    ▼                    ▼              │
    │    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐        │
    │    │ SocketServer │    │RequestParser │    │    Router    │        │
    │    │ (Networking) │    │  (Parsing)   │    │ (Dispatching)│        │
    │    └──────┬───────┘    └──────────────┘    └──────┬───────┘        │
    │           │                                       │                 │
    │           ▼                                       ▼                 │
    │    ┌──────────────┐                       ┌──────────────┐         │
    │    │  Connection  │                       │   Handlers   │         │
    │    │ (one thread) │                       │ root/echo/...│         │
    │    └──────────────┘                       └──────────────┘         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ERROR MAPPING
=============================================================================

    Failure                          Outcome
    ───────────────────────────────  ─────────────────────────────────────
    read fails / peer sends nothing  WARNING, connection dropped, no response
    HTTPParseError                   WARNING, 400 empty body, close
    MissingHeaderError               400 empty body
    ConfigurationError               500 empty body
    any other handler exception      ERROR with traceback, 500 empty body
    write fails                      WARNING, connection dropped

A failure on one connection never reaches the accept loop or any other
connection's thread.

=============================================================================
"""

import logging
import threading
from typing import Callable, Optional, Tuple

from .app import build_router
from .config import ServerConfig
from .core import Connection, ConnectionState, SocketServer
from .http import (
    HTTPError,
    HTTPParseError,
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    RequestParser,
    error_response,
)
from .middleware import LoggingMiddleware, MiddlewarePipeline

logger = logging.getLogger(__name__)


class HTTPServer:
    """
    The HTTP server.

    Usage:
        server = HTTPServer(ServerConfig(directory="/tmp/files"))
        server.run()  # Blocks until Ctrl+C or shutdown()

    In tests, run it in a thread on port 0:
        server = HTTPServer(ServerConfig(port=0))
        threading.Thread(target=server.run, daemon=True).start()
        server.wait_until_ready(5)
        host, port = server.address
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Defaults are used if not provided.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser(legacy_header_parsing=self.config.legacy_header_parsing)
        self._router = build_router(self.config)

        # Access logging wraps every routed request
        self._middleware = MiddlewarePipeline()
        self._middleware.add(LoggingMiddleware(log_format=self.config.log_format))

        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def address(self) -> Tuple[str, int]:
        """(host, port) actually bound. Meaningful once wait_until_ready() returns."""
        return self._socket_server.address

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is accepting connections."""
        return self._socket_server.wait_until_ready(timeout)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server. Blocks until shutdown() or Ctrl+C.

        Raises:
            OSError: If the listening socket can't be bound.
        """
        self._setup_logging()

        # Full pipeline: middleware wrapping the router
        self._handler = self._middleware.wrap(self._router.handle)

        logger.info(f"Starting {self.config.server_name} on {self.config.host}:{self.config.port}")
        if self.config.directory:
            logger.info(f"Serving files from {self.config.directory}")
        else:
            logger.info("No directory configured, /files/ requests will fail with 500")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self.shutdown()

    def shutdown(self):
        """
        Stop accepting connections. In-flight connection threads are daemons
        and finish (or die with the process) on their own.
        """
        self._socket_server.shutdown()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("tinyhttp").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Called by SocketServer for each accepted connection.

        Starts a daemon thread and returns at once so the accept loop can
        take the next client.
        """
        thread = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        thread.start()

    def _process_connection(self, conn: Connection):
        """
        Serve exactly one request on a connection (runs in its own thread).

            1. One bounded read
            2. Parse
            3. Middleware + router
            4. Write the response
            5. Close (the with block)
        """
        with conn:
            try:
                raw_request = conn.read_request()
            except ConnectionError as e:
                logger.warning(f"[{conn.id}] {conn.client_ip}: {e}")
                return

            try:
                request = self._parser.parse(raw_request, conn.address)
            except HTTPParseError as e:
                logger.warning(f"[{conn.id}] {conn.client_ip}: {e}")
                self._send(conn, error_response(e.status_code))
                return

            conn.state = ConnectionState.PROCESSING
            response = self._dispatch(conn, request)
            self._send(conn, response)

    def _dispatch(self, conn: Connection, request: HTTPRequest) -> HTTPResponse:
        """Run the request through the pipeline and map handler failures to a status."""
        handler = self._handler or self._middleware.wrap(self._router.handle)

        try:
            return handler(request)
        except HTTPError as e:
            # MissingHeaderError → 400, ConfigurationError → 500
            logger.warning(f"[{conn.id}] {request.request_line}: {e}")
            return error_response(e.status_code, request.version)
        except Exception as e:
            logger.exception(f"[{conn.id}] Handler error: {e}")
            return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, request.version)

    def _send(self, conn: Connection, response: HTTPResponse):
        """Write a response; a failed write only drops this connection."""
        try:
            conn.send_response(response.to_bytes())
        except ConnectionError as e:
            logger.warning(f"[{conn.id}] {conn.client_ip}: {e}")
