"""
=============================================================================
ACCESS LOGGING MIDDLEWARE
=============================================================================

One log line per routed request, on the "tinyhttp.access" logger.

    text:  127.0.0.1 - - [16/Oct/2026:10:00:00 +0000] "GET /echo/abc" 200 3 0.41ms
    json:  {"method": "GET", "path": "/echo/abc", "status_code": 200, ...}

Requests that never reach the router (read failures, parse errors) are
logged by the connection handler instead, on the "tinyhttp.server" logger.

Unlike a general-purpose access logger, this one adds NO response headers
(no X-Request-ID): responses carry at most Content-Type and
Content-Length.

=============================================================================
"""

import json
import logging
import time
from dataclasses import asdict, dataclass

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse

# Namespaced so operators can route access logs separately:
#   logging.getLogger("tinyhttp.access").addHandler(file_handler)
logger = logging.getLogger("tinyhttp.access")


@dataclass
class RequestLog:
    """
    Structured log entry for a request.

    Fields:
        method, path:    from the request line
        client_ip:       peer address
        user_agent:      "-" when absent
        status_code:     response status
        content_length:  response body size in bytes
        duration_ms:     time spent in the router and handler
        timestamp:       local time, Apache format
    """

    method: str
    path: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        """Format close to Apache's common log format."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware. Add it first so its timing covers
    everything else.

        pipeline.add(LoggingMiddleware(log_format="json"))
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        """
        Args:
            log_format: "text" (human readable) or "json" (machine parseable).
            log_level: Level used for successful requests.
        """
        self.log_format = log_format
        self.log_level = log_level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        start_time = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            # Log and re-raise: the connection handler decides the response
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.warning(
                f"Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        log_entry = RequestLog(
            method=request.method,
            path=request.path,
            client_ip=request.client_address[0],
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(log_entry.to_dict()))
        else:
            logger.log(self.log_level, log_entry.to_text())

        return response
