"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    # Defaults: 127.0.0.1:4221, no file serving
    python -m tinyhttp

    # Serve /files/ from a directory
    python -m tinyhttp --directory /tmp/files

    # Any port, JSON access log
    python -m tinyhttp -p 8080 --log-format json

Settings come from, highest priority first:

    1. Command-line flags
    2. Environment (HTTP_PORT, HTTP_DIRECTORY, ...; see ServerConfig.from_env)
    3. ServerConfig defaults

Flags default to None so that an omitted flag leaves the environment value
in place.

=============================================================================
"""

import argparse
import sys
from dataclasses import replace
from typing import List, Optional

from . import __version__
from .config import LOG_FORMATS, ServerConfig
from .server import HTTPServer


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="tinyhttp",
        description="Minimal HTTP/1.1 server on raw sockets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m tinyhttp                          # Run with defaults
  python -m tinyhttp --directory /tmp/files   # Enable /files/
  python -m tinyhttp --port 8080              # Custom port
  python -m tinyhttp --legacy-headers         # Whitespace-token headers
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 127.0.0.1)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 4221, 0 picks a free port)"
    )

    parser.add_argument(
        "--buffer-size",
        type=int,
        default=None,
        help="Bytes read per request (default: 1024)"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-connection socket timeout in seconds (default: none, block)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # FEATURE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--directory", "-d",
        default=None,
        help="Directory served and written by /files/"
    )

    parser.add_argument(
        "--legacy-headers",
        action="store_true",
        default=None,
        help="Parse headers as whitespace-separated name/value token pairs"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=list(LOG_FORMATS),
        default=None,
        help="Access log format (default: text)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"tinyhttp {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Layer the flags that were given over the environment configuration."""
    overrides = {
        "host": args.host,
        "port": args.port,
        "buffer_size": args.buffer_size,
        "timeout": args.timeout,
        "directory": args.directory,
        "legacy_header_parsing": args.legacy_headers,
        "log_level": args.log_level,
        "log_format": args.log_format,
    }
    return replace(
        ServerConfig.from_env(),
        **{key: value for key, value in overrides.items() if value is not None},
    )


def main(argv: Optional[List[str]] = None):
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        server = HTTPServer(config)
        server.run()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
