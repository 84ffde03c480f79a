"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

The part of the server that knows what HTTP looks like:

    request.py       bytes → HTTPRequest
    router.py        HTTPRequest → handler → HTTPResponse
    response.py      HTTPResponse → bytes
    status_codes.py  the status codes we can send
    errors.py        exceptions that map to a status code

Nothing in this package touches a socket. That makes every piece testable
with plain bytes in, plain bytes out.

=============================================================================
"""

from .errors import HTTPError, HTTPParseError, MissingHeaderError, ConfigurationError
from .request import HTTPRequest, RequestParser, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok,              # 200 OK
    created,         # 201 Created
    not_found,       # 404 Not Found
    error_response,  # 400 / 500 with empty body
)
from .router import Router, Route, RouteMatch
from .status_codes import HTTPStatus

__all__ = [
    # Errors
    "HTTPError",
    "HTTPParseError",
    "MissingHeaderError",
    "ConfigurationError",

    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "parse_request",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "created",
    "not_found",
    "error_response",

    # Routing
    "Router",
    "Route",
    "RouteMatch",

    # Status codes
    "HTTPStatus",
]
