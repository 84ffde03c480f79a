"""
=============================================================================
TINYHTTP - A Minimal HTTP/1.1 Server on Raw Sockets
=============================================================================

A small server that answers a fixed set of routes over plain TCP:

    GET  /                 200, empty body
    GET  /echo/<text>      200, <text> as text/plain
    GET  /user-agent       200, the User-Agent header as text/plain
    GET  /files/<name>     200 file bytes as application/octet-stream, or 404
    POST /files/<name>     201, request body written to <directory>/<name>
    anything else          404, empty body

One request per connection, one thread per connection, one bounded read
per request.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    tinyhttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m tinyhttp)
    ├── server.py            # HTTPServer: accept → thread → parse → route → write
    ├── app.py               # The route table
    ├── config.py            # ServerConfig dataclass
    ├── core/
    │   ├── socket_server.py # Bind, listen, accept loop
    │   └── connection.py    # One client socket
    ├── http/
    │   ├── request.py       # HTTPRequest + RequestParser
    │   ├── response.py      # HTTPResponse + ResponseBuilder
    │   ├── router.py        # Ordered pattern routing
    │   ├── status_codes.py  # The five statuses the server emits
    │   └── errors.py        # HTTPError hierarchy
    ├── middleware/
    │   ├── base.py          # Middleware + MiddlewarePipeline
    │   └── logging.py       # Access log
    └── handlers/
        ├── basic.py         # root, echo, user-agent
        └── files.py         # /files/ read and write

=============================================================================
QUICK START
=============================================================================

    from tinyhttp import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(port=4221, directory="/tmp/files"))
    server.run()

Or from the shell:

    python -m tinyhttp --directory /tmp/files

=============================================================================
"""

from .config import ServerConfig
from .server import HTTPServer

__version__ = "1.0.0"

__all__ = [
    "HTTPServer",
    "ServerConfig",
    "__version__",
]
