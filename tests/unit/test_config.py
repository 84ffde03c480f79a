"""
Unit tests for server configuration and the CLI.
"""

import pytest

from tinyhttp.__main__ import build_parser, config_from_args
from tinyhttp.config import ServerConfig


class TestServerConfig:
    """Tests for ServerConfig dataclass."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 4221
        assert config.buffer_size == 1024
        assert config.timeout is None
        assert config.directory is None
        assert config.legacy_header_parsing is False
        config.validate()

    def test_valid_directory(self, tmp_path):
        ServerConfig(directory=str(tmp_path)).validate()

    @pytest.mark.parametrize("kwargs", [
        {"port": -1},
        {"port": 65536},
        {"buffer_size": 10},
        {"backlog": 0},
        {"timeout": 0},
        {"timeout": -1.5},
        {"log_level": "LOUD"},
        {"log_format": "xml"},
        {"directory": "/definitely/not/a/real/dir"},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            ServerConfig(**kwargs).validate()


class TestFromEnv:
    """Tests for ServerConfig.from_env()."""

    def test_empty_environment(self, monkeypatch):
        for name in ("HTTP_HOST", "HTTP_PORT", "HTTP_DIRECTORY", "HTTP_TIMEOUT",
                     "HTTP_LOG_LEVEL", "HTTP_LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)

        assert ServerConfig.from_env() == ServerConfig()

    def test_reads_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HTTP_HOST", "0.0.0.0")
        monkeypatch.setenv("HTTP_PORT", "8080")
        monkeypatch.setenv("HTTP_DIRECTORY", str(tmp_path))
        monkeypatch.setenv("HTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("HTTP_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("HTTP_LOG_FORMAT", "json")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.directory == str(tmp_path)
        assert config.timeout == 2.5
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"


class TestCLI:
    """Tests for argument parsing and layering over the environment."""

    def test_directory_flag(self, monkeypatch, tmp_path):
        monkeypatch.delenv("HTTP_DIRECTORY", raising=False)
        args = build_parser().parse_args(["--directory", str(tmp_path)])

        assert config_from_args(args).directory == str(tmp_path)

    def test_short_flags(self):
        args = build_parser().parse_args(["-d", "/tmp", "-p", "9000", "-H", "0.0.0.0", "-l", "DEBUG"])

        assert (args.directory, args.port, args.host, args.log_level) == ("/tmp", 9000, "0.0.0.0", "DEBUG")

    def test_flags_override_environment(self, monkeypatch):
        monkeypatch.setenv("HTTP_PORT", "8080")
        monkeypatch.setenv("HTTP_HOST", "0.0.0.0")
        args = build_parser().parse_args(["--port", "9000", "--legacy-headers"])

        config = config_from_args(args)

        assert config.port == 9000
        assert config.host == "0.0.0.0"
        assert config.legacy_header_parsing is True

    def test_omitted_flags_keep_defaults(self, monkeypatch):
        monkeypatch.delenv("HTTP_PORT", raising=False)
        config = config_from_args(build_parser().parse_args([]))

        assert config.port == 4221
        assert config.legacy_header_parsing is False

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "tinyhttp" in capsys.readouterr().out
