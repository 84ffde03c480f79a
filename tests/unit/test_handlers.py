"""
Unit tests for route handlers.
"""

import pytest

from tinyhttp.handlers import FileHandler, echo, root, user_agent
from tinyhttp.http.errors import ConfigurationError, MissingHeaderError
from tinyhttp.http.request import HTTPRequest
from tinyhttp.http.status_codes import HTTPStatus


def make_request(method: str = "GET", path: str = "/", **kwargs) -> HTTPRequest:
    return HTTPRequest(method=method, path=path, **kwargs)


class TestBasicHandlers:
    """Tests for root, echo and user-agent."""

    def test_root(self):
        response = root(make_request(), {})

        assert response.status == HTTPStatus.OK
        assert response.headers == {}
        assert response.body == b""

    def test_echo(self):
        response = echo(make_request(path="/echo/abc"), {"text": "abc"})

        assert response.body == b"abc"
        assert response.headers == {"Content-Type": "text/plain", "Content-Length": "3"}

    def test_echo_keeps_version(self):
        response = echo(make_request(version="HTTP/1.0"), {"text": "x"})
        assert response.version == "HTTP/1.0"

    def test_user_agent(self):
        request = make_request(path="/user-agent", headers={"User-Agent": "curl/8.4.0"})
        response = user_agent(request, {})

        assert response.body == b"curl/8.4.0"
        assert response.headers["Content-Length"] == "10"

    def test_user_agent_missing(self):
        with pytest.raises(MissingHeaderError):
            user_agent(make_request(path="/user-agent"), {})


class TestFileHandler:
    """Tests for FileHandler class."""

    def test_read_existing(self, files_dir):
        response = FileHandler(files_dir).read(make_request(), {"name": "foo"})

        assert response.status == HTTPStatus.OK
        assert response.body == b"Hello, World!"
        assert response.headers == {
            "Content-Type": "application/octet-stream",
            "Content-Length": "13",
        }

    def test_read_missing(self, files_dir):
        response = FileHandler(files_dir).read(make_request(), {"name": "nope"})

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.body == b""

    def test_read_directory_is_not_found(self, files_dir):
        (files_dir / "sub").mkdir()
        handler = FileHandler(files_dir)

        assert handler.read(make_request(), {"name": "sub"}).status == HTTPStatus.NOT_FOUND
        assert handler.read(make_request(), {"name": ""}).status == HTTPStatus.NOT_FOUND

    def test_read_nested(self, files_dir):
        (files_dir / "a").mkdir()
        (files_dir / "a" / "b.txt").write_bytes(b"nested")

        response = FileHandler(files_dir).read(make_request(), {"name": "a/b.txt"})
        assert response.body == b"nested"

    def test_read_traversal_rejected(self, files_dir):
        (files_dir.parent / "secret").write_bytes(b"top secret")

        response = FileHandler(files_dir).read(make_request(), {"name": "../secret"})
        assert response.status == HTTPStatus.NOT_FOUND

    def test_write(self, files_dir):
        request = make_request("POST", "/files/number", body=b"12345")
        response = FileHandler(files_dir).write(request, {"name": "number"})

        assert response.status == HTTPStatus.CREATED
        assert response.body == b""
        assert (files_dir / "number").read_bytes() == b"12345"

    def test_write_overwrites(self, files_dir):
        FileHandler(files_dir).write(make_request("POST", body=b"new"), {"name": "foo"})
        assert (files_dir / "foo").read_bytes() == b"new"

    def test_write_empty_body(self, files_dir):
        FileHandler(files_dir).write(make_request("POST"), {"name": "empty"})
        assert (files_dir / "empty").read_bytes() == b""

    def test_write_creates_parents(self, files_dir):
        FileHandler(files_dir).write(make_request("POST", body=b"x"), {"name": "d/e/f"})
        assert (files_dir / "d" / "e" / "f").read_bytes() == b"x"

    def test_write_traversal_writes_nothing(self, files_dir):
        response = FileHandler(files_dir).write(
            make_request("POST", body=b"pwned"), {"name": "../evil"}
        )

        assert response.status == HTTPStatus.CREATED
        assert not (files_dir.parent / "evil").exists()

    def test_write_empty_name_is_created_without_writing(self, files_dir):
        before = sorted(p.name for p in files_dir.iterdir())

        response = FileHandler(files_dir).write(make_request("POST", body=b"abc"), {"name": ""})

        assert response.status == HTTPStatus.CREATED
        assert sorted(p.name for p in files_dir.iterdir()) == before

    def test_null_byte_in_name(self, files_dir):
        handler = FileHandler(files_dir)

        read = handler.read(make_request(), {"name": "a\x00b"})
        write = handler.write(make_request("POST", body=b"x"), {"name": "a\x00b"})

        assert read.status == HTTPStatus.NOT_FOUND
        assert write.status == HTTPStatus.CREATED
        assert not (files_dir / "a").exists()

    def test_write_failure_still_created(self, files_dir):
        (files_dir / "sub").mkdir()

        # Writing onto a directory fails with IsADirectoryError
        response = FileHandler(files_dir).write(make_request("POST", body=b"x"), {"name": "sub"})
        assert response.status == HTTPStatus.CREATED

    def test_no_directory_configured(self):
        handler = FileHandler(None)

        with pytest.raises(ConfigurationError) as exc_info:
            handler.read(make_request(), {"name": "foo"})
        assert exc_info.value.status_code == HTTPStatus.INTERNAL_SERVER_ERROR

        with pytest.raises(ConfigurationError):
            handler.write(make_request("POST"), {"name": "foo"})
