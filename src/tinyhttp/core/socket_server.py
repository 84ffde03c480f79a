"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

Binds the listening socket and accepts connections until told to stop.
Each accepted socket is wrapped in a Connection and handed to a callback;
what happens to it after that (threads, parsing, routing) is not this
module's business.

=============================================================================
SOCKET LIFECYCLE (Server Side)
=============================================================================

    1. socket()    Create a TCP socket
    2. setsockopt  SO_REUSEADDR so a restart doesn't hit "Address in use"
    3. bind()      Claim host:port (port 0 → OS picks one)
    4. listen()    Start queueing completed handshakes
    5. accept()    Pull one connection off the queue (loops forever)
    6. close()     On shutdown

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     Accept Loop Flow                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   while running:                                                     │
    │       accept()          blocks up to 1s, then re-checks running      │
    │         │                                                            │
    │         ├── timeout     → loop                                       │
    │         ├── OSError     → log, keep accepting (unless stopping)      │
    │         └── (sock, addr)                                             │
    │                │                                                     │
    │                └──► callback(Connection(sock, addr, ...))            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

An accept() failure (e.g. EMFILE, too many open files) affects one
connection attempt, not the server: it is logged and the loop goes on.

=============================================================================
"""

import logging
import signal
import socket
import threading
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection

logger = logging.getLogger(__name__)


class SocketServer:
    """
    TCP accept loop.

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown()
    """

    # How often accept() wakes up to check for shutdown
    ACCEPT_TIMEOUT = 1.0

    def __init__(self, config: ServerConfig):
        """
        Args:
            config: Server configuration (host, port, backlog, buffer size,
                    connection timeout).

        The socket is created in start(), not here.
        """
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._bound_address: Optional[Tuple[str, int]] = None

        # Set once the socket is listening, cleared again on cleanup
        self._ready_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def address(self) -> Tuple[str, int]:
        """
        The address actually bound.

        Differs from the configured one when port=0. Before start() this
        is the configured address.
        """
        return self._bound_address or (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create and configure the listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # SO_REUSEADDR: bind even while old connections sit in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Timeout on accept() so the loop can notice shutdown()
        sock.settimeout(self.ACCEPT_TIMEOUT)

        return sock

    def _setup_signals(self):
        """
        Install SIGINT/SIGTERM handlers for graceful shutdown.

        signal.signal() only works in the main thread. When the server runs
        in a background thread (tests, embedding) handlers are skipped and
        shutdown() must be called directly.
        """
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not in main thread, skipping signal handlers")
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        """Restore original signal handlers."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and run the accept loop. BLOCKS until shutdown().

        Args:
            connection_handler: Called with each new Connection. It must
                                return quickly (hand the work to a thread);
                                the accept loop waits for it.

        Raises:
            OSError: If the address can't be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)
        self._bound_address = self._socket.getsockname()[:2]

        self._running = True
        self._setup_signals()

        host, port = self._bound_address
        logger.info(f"Server listening on {host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """Accept connections until _running goes False."""
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                # Normal: lets us re-check self._running once a second
                continue
            except OSError as e:
                if not self._running:
                    break  # Socket closed by shutdown
                logger.error(f"Accept error: {e}")
                continue

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address[:2],
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
            )
            connection_handler(conn)

    def shutdown(self):
        """
        Stop the accept loop. Idempotent; safe from any thread or a signal
        handler. The loop exits within ACCEPT_TIMEOUT seconds.
        """
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        """Clean up resources on shutdown."""
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._running = False
        self._ready_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the socket is listening.

        Returns:
            True if listening, False on timeout.
        """
        return self._ready_event.wait(timeout)
