"""
=============================================================================
CONNECTION
=============================================================================

Wraps one accepted client socket: one bounded read in, one write out,
then close.

=============================================================================
ONE READ, ONE REQUEST
=============================================================================

TCP is a byte stream. A general HTTP server keeps calling recv() until it
has seen "\r\n\r\n" and then Content-Length more bytes. This server does
not:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       CONNECTION LIFECYCLE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   accept()                                                           │
    │      │                                                               │
    │      ▼                                                               │
    │   recv(buffer_size)   ◄── exactly ONE call, at most 1024 bytes      │
    │      │                                                               │
    │      ├── b""          → ConnectionError (peer closed)               │
    │      ├── OSError      → ConnectionError (reset, timeout, ...)       │
    │      ▼                                                               │
    │   parse → route → build                                              │
    │      │                                                               │
    │      ▼                                                               │
    │   sendall(response)                                                  │
    │      │                                                               │
    │      ▼                                                               │
    │   close()            ◄── no keep-alive, one request per connection  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Consequences worth knowing:
- A request longer than buffer_size is cut off. The parser sees the
  first buffer_size bytes and nothing else.
- A request that arrives in two TCP segments may be cut at the first one.
  On loopback with small requests that essentially never happens.
- With timeout=None a client that connects and sends nothing holds its
  thread until it disconnects.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """
    Connection lifecycle states, for logs and debugging.
    """
    NEW = "new"                # Just accepted
    READING = "reading"        # Inside the single recv()
    PROCESSING = "processing"  # Parsing and routing
    WRITING = "writing"        # Inside sendall()
    CLOSING = "closing"        # Shutdown sequence
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short unique identifier used as a log prefix.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
        buffer_size: Capacity of the single read.
        timeout: Socket timeout in seconds, None to block.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 1024
    timeout: Optional[float] = None

    # Total time close() spends draining unread client data
    DRAIN_TIMEOUT = 0.5

    def __post_init__(self):
        # settimeout(None) puts the socket in plain blocking mode
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> bytes:
        """
        Perform the one bounded read for this connection.

        Returns:
            The bytes received (1 to buffer_size of them).

        Raises:
            ConnectionError: The peer closed without sending anything, or
                             the read failed (reset, timeout, ...).
        """
        self.state = ConnectionState.READING

        try:
            data = self.socket.recv(self.buffer_size)
        except OSError as e:
            # socket.timeout is an OSError subclass too
            raise ConnectionError(f"Read failed: {e}") from e

        if not data:
            raise ConnectionError("Connection closed before a request was received")

        logger.debug(f"[{self.id}] Read {len(data)} bytes")
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> None:
        """
        Send the serialized response.

        sendall() loops until every byte is handed to the kernel; plain
        send() may write only part of it.

        Raises:
            ConnectionError: The peer went away or the write failed.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
        except OSError as e:
            raise ConnectionError(f"Write failed: {e}") from e

        logger.debug(f"[{self.id}] Sent {len(data)} bytes")

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR) sends FIN: the client's read returns b"".
        2. Drain whatever the client sent past our one read. Closing with
           unread data makes the kernel send RST, which can destroy the
           response before the client reads it.
        3. close() releases the file descriptor.

        Safe to call more than once.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        self._drain()

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.1f}ms")

    def _drain(self):
        """
        Read and discard until EOF or DRAIN_TIMEOUT seconds in total,
        whichever comes first. A peer that keeps sending can't hold the
        thread past the deadline.
        """
        deadline = time.monotonic() + self.DRAIN_TIMEOUT

        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.debug(f"[{self.id}] Drain deadline reached")
                    return
                self.socket.settimeout(remaining)
                if not self.socket.recv(self.buffer_size):
                    return
        except OSError:
            pass  # Timeout or reset, we're closing anyway

    def __enter__(self):
        """
        Context manager entry.

            with conn:
                data = conn.read_request()
                conn.send_response(response)
            # Connection automatically closed here
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
