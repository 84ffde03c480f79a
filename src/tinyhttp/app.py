"""
=============================================================================
ROUTE TABLE
=============================================================================

The one place that decides which URL does what, in priority order:

    ┌────────┬──────────────────┬─────────────────────────────────────────┐
    │ Method │ Path             │ Handler                                 │
    ├────────┼──────────────────┼─────────────────────────────────────────┤
    │ GET    │ /                │ basic.root         200, empty           │
    │ GET    │ /echo/*text      │ basic.echo         200, text/plain      │
    │ GET    │ /user-agent      │ basic.user_agent   200, text/plain      │
    │ GET    │ /files/*name     │ FileHandler.read   200 octet-stream/404 │
    │ POST   │ /files/*name     │ FileHandler.write  201                  │
    │ *      │ *                │ (router default)   404, empty           │
    └────────┴──────────────────┴─────────────────────────────────────────┘

=============================================================================
"""

from .config import ServerConfig
from .handlers import FileHandler, echo, root, user_agent
from .http.router import Router


def build_router(config: ServerConfig) -> Router:
    """
    Build the router for a server configuration.

    The serving directory is read here, once, and captured by the
    FileHandler. Later changes to config have no effect on the routes.
    """
    router = Router()
    files = FileHandler(config.directory)

    router.add_route("/", root, method="GET")
    router.add_route("/echo/*text", echo, method="GET")
    router.add_route("/user-agent", user_agent, method="GET")
    router.add_route("/files/*name", files.read, method="GET", name="read_file")
    router.add_route("/files/*name", files.write, method="POST", name="write_file")

    return router
