"""
Text handlers: root probe, echo, and user-agent reflection.

None of these need configuration. Each takes (request, params) as the
router passes them and returns a 200.
"""

from typing import Dict

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ok


def root(request: HTTPRequest, params: Dict[str, str]) -> HTTPResponse:
    """
    GET /

    Liveness probe: 200, no headers, empty body.

        HTTP/1.1 200 OK\r\n\r\n
    """
    return ok(request.version)


def echo(request: HTTPRequest, params: Dict[str, str]) -> HTTPResponse:
    """
    GET /echo/<text>

    Returns <text> as text/plain. The remainder is used as-is: no
    percent-decoding, slashes included.

        GET /echo/abc  →  Content-Type: text/plain, Content-Length: 3, "abc"
    """
    return ok(request.version, text=params["text"])


def user_agent(request: HTTPRequest, params: Dict[str, str]) -> HTTPResponse:
    """
    GET /user-agent

    Returns the request's User-Agent header as text/plain.

    Raises:
        MissingHeaderError: No User-Agent header (answered with 400).
    """
    return ok(request.version, text=request.require_header("User-Agent"))
