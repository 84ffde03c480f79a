"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can put on the wire, with their reason phrases.

=============================================================================
WHY SO FEW?
=============================================================================

The route table only ever produces three outcomes:

    ┌───────────┬──────────────────────────────────────────────────────────┐
    │  Code     │  Produced by                                             │
    ├───────────┼──────────────────────────────────────────────────────────┤
    │  200 OK   │  GET /, /echo/..., /user-agent, /files/... (found)        │
    │  201      │  POST /files/...                                          │
    │  404      │  Missing file, unknown route                              │
    └───────────┴──────────────────────────────────────────────────────────┘

Two more exist only on the connection handler's error paths:

    400 Bad Request            - Unparseable request, missing required header
    500 Internal Server Error  - Route needs configuration that isn't there

Anything else is a programming error. Because HTTPStatus is an IntEnum,
HTTPStatus(418) raises ValueError instead of silently producing a status
line with no reason phrase.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    Extends IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    # 2xx SUCCESS
    OK = 200                        # Request succeeded
    CREATED = 201                   # File written (POST /files/...)

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400               # Malformed request / missing header
    NOT_FOUND = 404                 # No such file or route

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500     # Misconfigured route (no directory)

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

        Used in the status line: "HTTP/1.1 200 OK"
        """
        return _STATUS_PHRASES[self]

    @property
    def is_success(self) -> bool:
        """Check if this is a 2xx status code."""
        return 200 <= self < 300

    @property
    def is_error(self) -> bool:
        """Check if this is an error status code (4xx or 5xx)."""
        return self >= 400


# =============================================================================
# REASON PHRASES
# =============================================================================
#
# HTTP/1.1 200 OK
#          ─── ──
#           │   │
#           │   └── Reason phrase (from this dict)
#           └────── Status code
#
# =============================================================================

_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
