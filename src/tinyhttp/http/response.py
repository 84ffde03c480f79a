"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds responses and serializes them to the exact bytes written to the
socket.

=============================================================================
WIRE FORMAT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     SERIALIZED RESPONSE                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.1 200 OK\r\n                  ← status line               │
    │    Content-Type: text/plain\r\n         ← zero or more headers      │
    │    Content-Length: 3\r\n                                             │
    │    \r\n                                 ← end of headers            │
    │    abc                                  ← body (only if non-empty)  │
    │    \r\n\r\n                             ← trailer (only after body) │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Empty body, no headers:

        b"HTTP/1.1 200 OK\r\n\r\n"

The trailing \r\n\r\n after a body is NOT counted in Content-Length and is
redundant as far as HTTP is concerned. Clients that frame by
Content-Length ignore it; existing protocol tests expect it, so it stays.

The protocol token in the status line is copied from the request, so an
"HTTP/1.0" request gets an "HTTP/1.0 ..." answer.

=============================================================================
CONTENT TYPES
=============================================================================

Only two bodies ever leave this server:

    text()          → Content-Type: text/plain
                      (echo, user-agent)
    octet_stream()  → Content-Type: application/octet-stream
                      (file contents)

Both set Content-Length to len(body) in BYTES, computed from the body
being sent, never estimated. "é" is one character and two bytes.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from .status_codes import HTTPStatus


@dataclass(frozen=True)
class HTTPResponse:
    """
    An HTTP response ready to be serialized. Built once, sent once.

        Handler returns          to_bytes()              Socket sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes

    Passing a status code that isn't an HTTPStatus member raises
    ValueError at construction time.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    def __post_init__(self):
        # Frozen dataclass: go through object.__setattr__ to coerce ints.
        object.__setattr__(self, "status", HTTPStatus(self.status))

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 404 Not Found"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def to_bytes(self) -> bytes:
        """
        Serialize the response for socket.sendall().

        Returns:
            Status line, header lines, blank line, then the body followed by
            \r\n\r\n when the body is non-empty.
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")

        # Trailing "" + "\r\n" gives the blank line that ends the headers
        lines.append("")
        head = "\r\n".join(lines).encode("utf-8") + b"\r\n"

        if not self.body:
            return head
        return head + self.body + b"\r\n\r\n"


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

        response = (ResponseBuilder()
            .version(request.version)
            .status(HTTPStatus.OK)
            .text("abc")
            .build())

    Every method except build() and to_bytes() returns self.
    """

    def __init__(self, version: str = "HTTP/1.1"):
        self._status = HTTPStatus.OK
        self._version = version
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    # =========================================================================
    # STATUS LINE
    # =========================================================================

    def status(self, status: Union[HTTPStatus, int]) -> "ResponseBuilder":
        """
        Set the HTTP status code.

        Raises:
            ValueError: status is not a code this server knows how to send.
        """
        self._status = HTTPStatus(status)
        return self

    def version(self, version: str) -> "ResponseBuilder":
        """Set the protocol token echoed in the status line."""
        self._version = version
        return self

    # =========================================================================
    # HEADERS
    # =========================================================================

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Add a single response header."""
        self._headers[name] = value
        return self

    # =========================================================================
    # BODY
    # =========================================================================

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set the raw response body without touching headers.

        Strings are encoded as UTF-8.
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._body = body
        return self

    def text(self, text: str) -> "ResponseBuilder":
        """
        Set a plain text body.

        Sets Content-Type: text/plain and Content-Length to the UTF-8 byte
        length of text.
        """
        return self._content(text.encode("utf-8"), "text/plain")

    def octet_stream(self, data: bytes) -> "ResponseBuilder":
        """
        Set a binary body (file contents).

        Sets Content-Type: application/octet-stream and Content-Length.
        """
        return self._content(data, "application/octet-stream")

    def _content(self, data: bytes, content_type: str) -> "ResponseBuilder":
        self._body = data
        # Insertion order puts Content-Type before Content-Length
        self._headers["Content-Type"] = content_type
        self._headers["Content-Length"] = str(len(data))
        return self

    # =========================================================================
    # BUILD
    # =========================================================================

    def build(self) -> HTTPResponse:
        """Build the immutable HTTPResponse."""
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
            version=self._version,
        )

    def to_bytes(self) -> bytes:
        """Build and serialize in one step."""
        return self.build().to_bytes()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# One-liners for the responses handlers actually produce:
#
#     return ok(request.version)                      # 200, empty body
#     return ok(request.version, text="abc")          # 200, text/plain
#     return ok(request.version, data=file_bytes)     # 200, octet-stream
#     return created(request.version)                 # 201
#     return not_found(request.version)               # 404
#
# =============================================================================

def ok(
    version: str = "HTTP/1.1",
    text: Optional[str] = None,
    data: Optional[bytes] = None
) -> HTTPResponse:
    """
    Create a 200 OK response.

    Args:
        version: Protocol token from the request.
        text: Plain text body (sets text/plain headers).
        data: Binary body (sets application/octet-stream headers).

    With neither, the body is empty and no headers are added.
    """
    builder = ResponseBuilder(version).status(HTTPStatus.OK)
    if text is not None:
        builder.text(text)
    elif data is not None:
        builder.octet_stream(data)
    return builder.build()


def created(version: str = "HTTP/1.1") -> HTTPResponse:
    """Create a 201 Created response with an empty body."""
    return ResponseBuilder(version).status(HTTPStatus.CREATED).build()


def not_found(version: str = "HTTP/1.1") -> HTTPResponse:
    """Create a 404 Not Found response with an empty body."""
    return ResponseBuilder(version).status(HTTPStatus.NOT_FOUND).build()


def error_response(status: Union[HTTPStatus, int], version: str = "HTTP/1.1") -> HTTPResponse:
    """Create an empty-bodied response for an error status."""
    return ResponseBuilder(version).status(status).build()
