"""
=============================================================================
CORE NETWORKING
=============================================================================

Sockets and nothing else:

    socket_server.py   bind, listen, accept loop, graceful shutdown
    connection.py      one client socket: single bounded read, write, close

=============================================================================
CONCURRENCY MODEL
=============================================================================

    Main thread                     Connection threads
    ───────────                     ──────────────────
    accept() ──► Connection ──► Thread(target=process) ──► read
    accept() ──► Connection ──► Thread(target=process) ──► parse
    accept() ──► ...                                       route
                                                           write
                                                           close

One thread per connection, started by HTTPServer. No pool, no queue, no
limit: every accepted socket gets its own thread immediately. Threads share
only the read-only configuration and the stateless parser and router.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",     # Accept loop
    "Connection",       # Wrapper for a client socket
    "ConnectionState",  # Connection lifecycle states
]
