"""
=============================================================================
FILE HANDLER
=============================================================================

Reads and writes whole files under the serving directory.

    GET  /files/<name>   → 200 + file bytes (application/octet-stream)
                         → 404 if there is no such file
    POST /files/<name>   → body written verbatim, 201

=============================================================================
PATH RESOLUTION
=============================================================================

<name> is the opaque remainder of the URL path. It is joined to the
serving directory and resolved, then checked to still be inside it:

    directory = /srv/files

    "report.txt"          → /srv/files/report.txt        ✓
    "logs/today.txt"      → /srv/files/logs/today.txt    ✓
    "../../etc/passwd"    → /etc/passwd                  ✗ outside
    "/etc/passwd"         → /etc/passwd                  ✗ outside

    resolve() follows symlinks and collapses "..", so the check runs on the
    real location, not on the string the client sent.

A name that escapes the directory, names the directory itself or isn't a
valid path (NUL byte) is never touched: GET answers 404, POST answers
201 without writing anything.

=============================================================================
WRITE FAILURES
=============================================================================

POST answers 201 even when the write fails (disk full, permission
denied, <name> is an existing directory or can't be resolved). The
failure is logged at WARNING.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from ..http.errors import ConfigurationError
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, created, not_found, ok

logger = logging.getLogger(__name__)


class FileHandler:
    """
    GET/POST handler for /files/<name>.

    One instance is built at startup with the configured directory and
    shared by all connection threads. It holds no mutable state.

        files = FileHandler("/srv/files")
        router.get("/files/*name")(files.read)
        router.post("/files/*name")(files.write)
    """

    def __init__(self, directory: Optional[Union[str, Path]]):
        """
        Args:
            directory: Serving directory, or None if the server was started
                       without one. In that case every request raises
                       ConfigurationError.
        """
        self.directory = Path(directory).resolve() if directory is not None else None

    def read(self, request: HTTPRequest, params: Dict[str, str]) -> HTTPResponse:
        """GET /files/<name>: file contents, or 404."""
        path = self._resolve(params["name"])
        if path is None or not path.is_file():
            return not_found(request.version)

        try:
            data = path.read_bytes()
        except OSError as e:
            logger.warning(f"Could not read {path}: {e}")
            return not_found(request.version)

        return ok(request.version, data=data)

    def write(self, request: HTTPRequest, params: Dict[str, str]) -> HTTPResponse:
        """
        POST /files/<name>: write the body verbatim, always 201.

        A name that can't be mapped to a file inside the directory (empty,
        traversal, NUL byte) is logged and nothing is written.
        """
        path = self._resolve(params["name"])
        if path is None:
            logger.warning(f"Refusing to write {params['name']!r}")
            return created(request.version)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(request.body)
            logger.debug(f"Wrote {len(request.body)} bytes to {path}")
        except OSError as e:
            logger.warning(f"Could not write {path}: {e}")

        return created(request.version)

    def _resolve(self, name: str) -> Optional[Path]:
        """
        Map <name> to a path inside the serving directory.

        Returns:
            The resolved path, or None if it escapes the directory, is the
            directory itself, or is not a valid file system path.

        Raises:
            ConfigurationError: No serving directory configured.
        """
        if self.directory is None:
            raise ConfigurationError("No serving directory configured for /files/")

        try:
            full_path = (self.directory / name).resolve()
        except (OSError, ValueError) as e:
            # e.g. "embedded null byte"
            logger.warning(f"Unusable file name {name!r}: {e}")
            return None

        try:
            full_path.relative_to(self.directory)  # Raises if outside root!
        except ValueError:
            logger.warning(f"Path traversal attempt: {name!r}")
            return None

        if full_path == self.directory:
            return None

        return full_path
