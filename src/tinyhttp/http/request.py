"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the bytes of one bounded socket read into an immutable HTTPRequest.

=============================================================================
WHAT THE PARSER SEES
=============================================================================

The connection performs exactly ONE recv() of at most buffer_size bytes.
Whatever arrived is handed to the parser as-is:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          ONE READ BUFFER                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   POST /files/report.txt HTTP/1.1\r\n        ┐                      │
    │   Host: localhost:4221\r\n                   │  HEAD                │
    │   Content-Length: 5\r\n                      │  (decoded as UTF-8,  │
    │   Content-Type: application/octet-stream\r\n ┘   lossy)             │
    │   \r\n                                       ◄── separator          │
    │   hello                                      ◄── BODY (raw bytes)   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    1. Split on the FIRST \r\n\r\n. No separator? The whole buffer is the
       head and the body is empty (truncated requests degrade, they don't
       fail).
    2. Decode the head as UTF-8; invalid bytes become U+FFFD instead of
       raising.
    3. The first three whitespace-separated tokens of the request line are
       METHOD, PATH and VERSION. Fewer than three is fatal: HTTPParseError.
    4. Headers are parsed line by line ("Name: value"), or, in legacy mode,
       as whitespace tokens taken in pairs.
    5. The body is never interpreted. It is written to disk verbatim by
       POST /files/..., so it stays bytes.

=============================================================================
LINE-BASED vs LEGACY TOKEN HEADERS
=============================================================================

    Head:   GET /user-agent HTTP/1.1\r\nUser-Agent: curl/8.4.0 (x86_64)\r\n

    Line-based (default):
        {"User-Agent": "curl/8.4.0 (x86_64)"}

    Legacy tokens (legacy_header_parsing=True):
        tokens after the request line:
            ["User-Agent:", "curl/8.4.0", "(x86_64)"]
        pairs:
            ("User-Agent:", "curl/8.4.0")  → {"User-Agent": "curl/8.4.0"}
            "(x86_64)" is unpaired          → dropped

    Legacy mode exists for wire compatibility with clients tested against
    the pairwise tokenizer. A header value containing a space shifts every
    pair after it, which is why it is not the default.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
import logging

from .errors import HTTPParseError, MissingHeaderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed HTTP request. Created once per connection, never modified.

    Attributes:
        method:         Request method token ("GET", "POST", anything else
                        passes through and simply matches no route).
        path:           Request target exactly as sent, including leading "/".
                        Not percent-decoded.
        version:        Protocol token ("HTTP/1.1"). Echoed verbatim in the
                        response status line.
        headers:        Header name → value. Names are kept exactly as the
                        client wrote them.
        body:           Raw bytes after the blank line (may be empty).
        client_address: (ip, port) of the peer, for logging.
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    client_address: tuple[str, int] = ("", 0)

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Look up a header value.

        The literal name wins; otherwise the first header whose name matches
        case-insensitively is returned.

        Example:
            request.get_header("user-agent")  # finds "User-Agent: curl"
        """
        if name in self.headers:
            return self.headers[name]
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default

    def require_header(self, name: str) -> str:
        """
        Like get_header(), but a missing header is an error.

        Raises:
            MissingHeaderError: The client didn't send the header.
        """
        value = self.get_header(name)
        if value is None:
            raise MissingHeaderError(name)
        return value

    @property
    def user_agent(self) -> Optional[str]:
        """The User-Agent header value, or None if absent."""
        return self.get_header("User-Agent")

    @property
    def request_line(self) -> str:
        """The request line as it would appear on the wire (for logs)."""
        return f"{self.method} {self.path} {self.version}"


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

    The parser is stateless once constructed; one instance is shared by
    every connection thread.
    """

    # Blank line between head and body (CRLF CRLF)
    SEPARATOR = b"\r\n\r\n"

    def __init__(self, legacy_header_parsing: bool = False):
        """
        Initialize the request parser.

        Args:
            legacy_header_parsing: Parse headers as whitespace tokens taken
                                   in pairs instead of one "Name: value" per
                                   line.
        """
        self.legacy_header_parsing = legacy_header_parsing

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse the bytes of one read into an HTTPRequest.

        Args:
            data: Raw bytes received from the socket.
            client_address: Client's (ip, port) tuple for logging.

        Returns:
            Parsed HTTPRequest.

        Raises:
            HTTPParseError: If method, path or version is missing.
        """
        # =====================================================================
        # STEP 1: Split head and body on the first blank line
        # =====================================================================
        # partition() returns (data, b"", b"") when the separator is absent,
        # which is exactly the "whole buffer is head" fallback.
        head_bytes, separator, body = data.partition(self.SEPARATOR)
        if not separator:
            logger.debug("No header terminator in %d bytes, treating all as head", len(data))

        # =====================================================================
        # STEP 2: Decode the head (lossy)
        # =====================================================================
        head = head_bytes.decode("utf-8", errors="replace")

        # =====================================================================
        # STEP 3 + 4: Request line and headers
        # =====================================================================
        if self.legacy_header_parsing:
            method, path, version, headers = self._parse_tokens(head)
        else:
            lines = head.split("\r\n")
            method, path, version = self._parse_request_line(lines[0])
            headers = self._parse_headers(lines[1:])

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            body=body,
            client_address=client_address,
        )

    def _parse_request_line(self, line: str) -> tuple[str, str, str]:
        """
        Split the request line into (method, path, version).

            "GET /echo/abc HTTP/1.1"
             ─┬─ ────┬──── ───┬────
              │      │        │
            Method  Path    Version

        Raises:
            HTTPParseError: Fewer than three tokens.
        """
        tokens = line.split()
        if len(tokens) < 3:
            raise HTTPParseError(f"Malformed request line: {line!r}")
        method, path, version = tokens[:3]
        return method, path, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Parse "Name: value" lines into a dict.

        The name is everything before the first colon (surrounding
        whitespace trimmed, case preserved); the value is everything after
        it, trimmed. Lines without a colon are skipped. A repeated name
        keeps the last value.
        """
        headers: Dict[str, str] = {}

        for line in lines:
            if not line:
                continue

            name, colon, value = line.partition(":")
            if not colon:
                logger.debug("Skipping malformed header line: %r", line)
                continue

            headers[name.strip()] = value.strip()

        return headers

    def _parse_tokens(self, head: str) -> tuple[str, str, str, Dict[str, str]]:
        """
        Legacy whitespace tokenizer for the whole head.

            tokens[0:3]  → method, path, version
            tokens[3:]   → (name:, value) pairs; a trailing odd token is dropped

        Raises:
            HTTPParseError: Fewer than three tokens in the head.
        """
        tokens = head.split()
        if len(tokens) < 3:
            raise HTTPParseError(f"Malformed request head: {head!r}")

        method, path, version = tokens[:3]
        rest = tokens[3:]

        headers: Dict[str, str] = {}
        for i in range(0, len(rest) - 1, 2):
            name = rest[i]
            if name.endswith(":"):
                name = name[:-1]
            headers[name] = rest[i + 1]

        return method, path, version, headers


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
    legacy_header_parsing: bool = False
) -> HTTPRequest:
    """
    Parse an HTTP request in one call.

    Use RequestParser directly when parsing many requests with the same
    settings.
    """
    parser = RequestParser(legacy_header_parsing=legacy_header_parsing)
    return parser.parse(data, client_address)
