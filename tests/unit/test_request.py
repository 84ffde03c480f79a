"""
Unit tests for HTTP request parsing.
"""

import pytest

from tinyhttp.http.errors import HTTPParseError, MissingHeaderError
from tinyhttp.http.request import HTTPRequest, RequestParser, parse_request
from tinyhttp.http.status_codes import HTTPStatus


class TestRequestParser:
    """Tests for RequestParser class (line-based headers)."""

    def test_parse_simple_get(self, sample_get_request):
        request = RequestParser().parse(sample_get_request, ("127.0.0.1", 5000))

        assert request.method == "GET"
        assert request.path == "/echo/abc"
        assert request.version == "HTTP/1.1"
        assert request.headers["Host"] == "localhost:4221"
        assert request.headers["User-Agent"] == "foobar/1.2.3"
        assert request.body == b""
        assert request.client_address == ("127.0.0.1", 5000)

    def test_parse_post_with_body(self, sample_post_request):
        request = RequestParser().parse(sample_post_request)

        assert request.method == "POST"
        assert request.path == "/files/number"
        assert request.body == b"12345"

    def test_header_value_with_spaces_and_colons(self):
        data = b"GET / HTTP/1.1\r\nUser-Agent: Mozilla/5.0 (X11; Linux)\r\nHost: a:80\r\n\r\n"
        request = RequestParser().parse(data)

        assert request.headers["User-Agent"] == "Mozilla/5.0 (X11; Linux)"
        assert request.headers["Host"] == "a:80"

    def test_header_line_without_colon_is_skipped(self):
        data = b"GET / HTTP/1.1\r\nnonsense\r\nHost: x\r\n\r\n"
        request = RequestParser().parse(data)

        assert request.headers == {"Host": "x"}

    def test_duplicate_header_last_wins(self):
        data = b"GET / HTTP/1.1\r\nX-A: 1\r\nX-A: 2\r\n\r\n"
        assert RequestParser().parse(data).headers["X-A"] == "2"

    def test_missing_separator_treats_everything_as_head(self):
        request = RequestParser().parse(b"GET /user-agent HTTP/1.1\r\nUser-Agent: x")

        assert request.path == "/user-agent"
        assert request.headers["User-Agent"] == "x"
        assert request.body == b""

    def test_body_keeps_everything_after_first_separator(self):
        data = b"POST /files/a HTTP/1.1\r\n\r\nline1\r\n\r\nline2"
        assert RequestParser().parse(data).body == b"line1\r\n\r\nline2"

    def test_binary_body_is_kept_verbatim(self):
        body = bytes(range(256))
        request = RequestParser().parse(b"POST /files/bin HTTP/1.1\r\n\r\n" + body)

        assert request.body == body

    def test_invalid_utf8_in_head_is_replaced(self):
        data = b"GET /echo/\xff\xfe HTTP/1.1\r\n\r\n"
        request = RequestParser().parse(data)

        assert request.path == "/echo/\ufffd\ufffd"

    def test_version_token_is_kept_verbatim(self):
        request = RequestParser().parse(b"GET / HTTP/1.0\r\n\r\n")
        assert request.version == "HTTP/1.0"

    def test_extra_request_line_tokens_are_ignored(self):
        request = RequestParser().parse(b"GET / HTTP/1.1 extra\r\n\r\n")
        assert (request.method, request.path, request.version) == ("GET", "/", "HTTP/1.1")

    @pytest.mark.parametrize("data", [
        b"",
        b"\r\n\r\n",
        b"GET\r\n\r\n",
        b"GET /\r\n\r\n",
    ])
    def test_missing_tokens_raise_parse_error(self, data):
        with pytest.raises(HTTPParseError) as exc_info:
            RequestParser().parse(data)

        assert exc_info.value.status_code == HTTPStatus.BAD_REQUEST


class TestLegacyHeaderParsing:
    """Tests for whitespace-token header parsing."""

    def test_pairs_of_tokens(self):
        data = b"GET /user-agent HTTP/1.1\r\nHost: localhost\r\nUser-Agent: curl/8.0\r\n\r\n"
        request = RequestParser(legacy_header_parsing=True).parse(data)

        assert request.method == "GET"
        assert request.headers == {"Host": "localhost", "User-Agent": "curl/8.0"}

    def test_value_with_spaces_is_split(self):
        data = b"GET / HTTP/1.1\r\nUser-Agent: a b\r\n\r\n"
        request = RequestParser(legacy_header_parsing=True).parse(data)

        # "b" is left as an odd trailing token and dropped
        assert request.headers == {"User-Agent": "a"}

    def test_only_one_trailing_colon_is_stripped(self):
        data = b"GET / HTTP/1.1\r\nX:: y\r\n\r\n"
        request = RequestParser(legacy_header_parsing=True).parse(data)

        assert request.headers == {"X:": "y"}

    def test_too_few_tokens(self):
        with pytest.raises(HTTPParseError):
            RequestParser(legacy_header_parsing=True).parse(b"GET /\r\n\r\n")

    def test_convenience_function(self):
        request = parse_request(
            b"GET / HTTP/1.1\r\nA: b\r\n\r\n",
            legacy_header_parsing=True,
        )
        assert request.headers == {"A": "b"}


class TestHTTPRequest:
    """Tests for HTTPRequest dataclass."""

    def test_get_header_case_insensitive(self):
        request = HTTPRequest(method="GET", path="/", headers={"User-Agent": "x"})

        assert request.get_header("User-Agent") == "x"
        assert request.get_header("user-agent") == "x"
        assert request.get_header("X-Missing") is None
        assert request.get_header("X-Missing", "default") == "default"

    def test_user_agent_property(self):
        assert HTTPRequest(method="GET", path="/").user_agent is None
        assert HTTPRequest(method="GET", path="/", headers={"user-agent": "y"}).user_agent == "y"

    def test_require_header_missing(self):
        request = HTTPRequest(method="GET", path="/")

        with pytest.raises(MissingHeaderError) as exc_info:
            request.require_header("User-Agent")

        assert exc_info.value.status_code == HTTPStatus.BAD_REQUEST
        assert "User-Agent" in str(exc_info.value)

    def test_request_is_immutable(self):
        request = HTTPRequest(method="GET", path="/")

        with pytest.raises(AttributeError):
            request.path = "/other"

    def test_request_line(self):
        request = HTTPRequest(method="GET", path="/echo/a", version="HTTP/1.0")
        assert request.request_line == "GET /echo/a HTTP/1.0"
