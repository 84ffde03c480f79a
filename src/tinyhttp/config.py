"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m tinyhttp --directory /tmp/files                 │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTP_DIRECTORY=/tmp/files python -m tinyhttp              │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
SHARED, READ-ONLY
=============================================================================

One ServerConfig is created at startup and read by every connection
thread. Nobody writes to it after HTTPServer is constructed, so no lock
is needed. The serving directory in particular is captured once by the
file handler when the route table is built.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional


LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    Development:
        ServerConfig(directory="/tmp/files", log_level="DEBUG")

    Tests:
        ServerConfig(port=0)    # OS picks a free port
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """The IP address to bind to. Loopback by default."""

    port: int = 4221
    """
    The port number to listen on.
    0 asks the OS for any free port (see HTTPServer.address).
    """

    backlog: int = 128
    """Maximum number of completed connections waiting to be accepted."""

    buffer_size: int = 1024
    """
    Capacity of the single read performed per connection.
    A request longer than this is silently truncated.
    """

    timeout: Optional[float] = None
    """
    Per-connection socket timeout in seconds.
    None = block forever on the read, which is the historical behavior.
    Set it to stop a silent client from pinning a thread.
    """

    # ─────────────────────────────────────────────────────────────────────
    # APPLICATION SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    directory: Optional[str] = None
    """
    Serving directory for /files/<name>.
    Without it every /files/ request answers 500.
    """

    legacy_header_parsing: bool = False
    """
    Parse headers as whitespace tokens in pairs instead of line by line.
    Only for clients that depend on the old tokenizer's quirks.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'text' (human) or 'json' (log aggregators)."""

    server_name: str = "tinyhttp/1.0"
    """Shown in the startup banner and logs. Never sent as a header."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_HOST        Server host (default: 127.0.0.1)
        HTTP_PORT        Server port (default: 4221)
        HTTP_DIRECTORY   Serving directory for /files/ (default: None)
        HTTP_TIMEOUT     Read timeout in seconds (default: None, block)
        HTTP_LOG_LEVEL   Logging level (default: INFO)
        HTTP_LOG_FORMAT  text or json (default: text)

        =====================================================================
        """
        timeout = os.getenv("HTTP_TIMEOUT")
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "4221")),
            directory=os.getenv("HTTP_DIRECTORY") or None,
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("HTTP_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called by HTTPServer at construction: a typo in a flag should stop
        the process at startup, not on the first /files/ request.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.buffer_size < 64:
            raise ValueError("buffer_size must be >= 64")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {LOG_FORMATS}")

        if self.directory is not None and not os.path.isdir(self.directory):
            raise ValueError(f"Serving directory does not exist: {self.directory}")
