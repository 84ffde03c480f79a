"""
=============================================================================
HTTP ERRORS
=============================================================================

Exceptions that carry the HTTP status the connection handler should answer
with. Handlers and the parser raise them; only the connection handler in
server.py catches them and turns them into responses.

    ┌──────────────────────┬────────┬──────────────────────────────────────┐
    │  Exception           │ Status │  Raised when                         │
    ├──────────────────────┼────────┼──────────────────────────────────────┤
    │  HTTPParseError      │  400   │  Request line has < 3 tokens         │
    │  MissingHeaderError  │  400   │  GET /user-agent without User-Agent  │
    │  ConfigurationError  │  500   │  /files/... with no --directory      │
    └──────────────────────┴────────┴──────────────────────────────────────┘

Transport failures (peer closed, recv/send failed) are NOT in this family.
They surface as the built-in ConnectionError and never get a response,
because there is nobody left to send it to.

=============================================================================
"""

from typing import Optional

from .status_codes import HTTPStatus


class HTTPError(Exception):
    """
    Base class for errors that map to an HTTP response status.

    Subclasses set status_code as a class attribute; a single instance can
    override it:

        raise HTTPError("nope", HTTPStatus.BAD_REQUEST)
    """

    status_code: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[HTTPStatus] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = HTTPStatus(status_code)


class HTTPParseError(HTTPError):
    """Raised when the raw bytes do not form a usable HTTP request."""

    status_code = HTTPStatus.BAD_REQUEST


class MissingHeaderError(HTTPError):
    """Raised when a handler needs a request header the client didn't send."""

    status_code = HTTPStatus.BAD_REQUEST

    def __init__(self, header_name: str):
        super().__init__(f"Missing required header: {header_name}")
        self.header_name = header_name


class ConfigurationError(HTTPError):
    """Raised when a route depends on configuration that was never provided."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
