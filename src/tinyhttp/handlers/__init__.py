"""
=============================================================================
REQUEST HANDLERS
=============================================================================

Every handler has the router's signature:

    def handler(request: HTTPRequest, params: dict[str, str]) -> HTTPResponse

    basic.py   root, echo, user_agent   (no configuration)
    files.py   FileHandler.read/write   (needs the serving directory)

Handlers never touch sockets and never catch HTTPError. A missing header
or missing directory propagates to the connection handler, which decides
what goes on the wire.

=============================================================================
"""

from .basic import root, echo, user_agent
from .files import FileHandler

__all__ = [
    "root",
    "echo",
    "user_agent",
    "FileHandler",
]
