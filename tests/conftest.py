"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator, Optional

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tinyhttp import HTTPServer, ServerConfig


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /echo/abc HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"User-Agent: foobar/1.2.3\r\n"
        b"Accept: */*\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a body."""
    body = b"12345"
    return (
        b"POST /files/number HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"Content-Type: application/octet-stream\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
        + body
    )


@pytest.fixture
def files_dir(tmp_path: Path) -> Path:
    """A serving directory with one file in it."""
    directory = tmp_path / "files"
    directory.mkdir()
    (directory / "foo").write_bytes(b"Hello, World!")
    return directory


def send_raw(address, data: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes to the server and read until it closes the connection."""
    with socket.create_connection(address, timeout=timeout) as sock:
        if data:
            sock.sendall(data)
        chunks = []
        while True:
            chunk = sock.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


class LiveServer:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def address(self):
        return self.server.address

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, data: bytes) -> bytes:
        return send_raw(self.address, data)


@pytest.fixture
def server_factory() -> Generator:
    """Start servers with custom configuration. All are stopped on teardown."""
    started = []

    def start(**overrides) -> LiveServer:
        settings = {"host": "127.0.0.1", "port": 0, "timeout": 5.0, "log_level": "WARNING"}
        settings.update(overrides)
        live = LiveServer(HTTPServer(ServerConfig(**settings)))
        live.start()
        started.append(live)
        return live

    yield start

    for live in started:
        live.stop()


@pytest.fixture
def live_server(server_factory, files_dir: Path) -> LiveServer:
    """A running server on an OS-assigned port, serving files_dir."""
    return server_factory(directory=str(files_dir))

