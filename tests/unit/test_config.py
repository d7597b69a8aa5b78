"""
Unit tests for configuration objects.
"""

import dataclasses

import pytest

from fileserver.config import FileServerConfig, ServerConfig


class TestFileServerConfig:
    """Tests for FileServerConfig."""

    def test_defaults(self):
        config = FileServerConfig(serving_root="/srv/www")

        assert config.possible_extensions == ()
        assert config.serve_index_for_directory is True
        assert config.redirect_on_directory is True
        assert config.accept_ranges is True
        assert config.index_file == "index.html"

    @pytest.mark.parametrize("root,expected", [
        ("/srv/www/", "/srv/www"),
        ("/srv/www//", "/srv/www"),
        ("/srv/www", "/srv/www"),
        ("/", "/"),
        ("./public/", "./public"),
    ])
    def test_root_normalized(self, root, expected):
        assert FileServerConfig(serving_root=root).serving_root == expected

    def test_extensions_normalized(self):
        config = FileServerConfig(
            serving_root="/srv/www",
            possible_extensions=(".html", "htm", "", " .txt "),
        )
        assert config.possible_extensions == ("html", "htm", "txt")

    def test_frozen(self):
        config = FileServerConfig(serving_root="/srv/www")

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.accept_ranges = False

    def test_validate_ok(self, serving_root):
        FileServerConfig(serving_root=str(serving_root)).validate()

    def test_validate_missing_root(self, tmp_path):
        with pytest.raises(ValueError, match="not a directory"):
            FileServerConfig(serving_root=str(tmp_path / "missing")).validate()

    def test_validate_root_is_file(self, serving_root):
        with pytest.raises(ValueError):
            FileServerConfig(serving_root=str(serving_root / "data.bin")).validate()

    @pytest.mark.parametrize("index_file", ["", "docs/index.html"])
    def test_validate_index_file(self, serving_root, index_file):
        config = FileServerConfig(serving_root=str(serving_root), index_file=index_file)

        with pytest.raises(ValueError, match="index_file"):
            config.validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("FILESERVER_ROOT", "/data/")
        monkeypatch.setenv("FILESERVER_EXTENSIONS", "html,.htm")
        monkeypatch.setenv("FILESERVER_INDEX_FILE", "default.htm")
        monkeypatch.setenv("FILESERVER_SERVE_INDEX", "0")
        monkeypatch.setenv("FILESERVER_REDIRECT", "false")
        monkeypatch.setenv("FILESERVER_ACCEPT_RANGES", "yes")

        config = FileServerConfig.from_env()

        assert config.serving_root == "/data"
        assert config.possible_extensions == ("html", "htm")
        assert config.index_file == "default.htm"
        assert config.serve_index_for_directory is False
        assert config.redirect_on_directory is False
        assert config.accept_ranges is True

    def test_from_env_defaults(self, monkeypatch):
        for name in ("FILESERVER_ROOT", "FILESERVER_EXTENSIONS", "FILESERVER_REDIRECT"):
            monkeypatch.delenv(name, raising=False)

        config = FileServerConfig.from_env()

        assert config.serving_root == "."
        assert config.possible_extensions == ()
        assert config.redirect_on_directory is True

    def test_from_env_explicit_root_wins(self, monkeypatch):
        monkeypatch.setenv("FILESERVER_ROOT", "/data")
        assert FileServerConfig.from_env("/other").serving_root == "/other"


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults_validate(self):
        ServerConfig().validate()

    def test_port_zero_allowed(self):
        ServerConfig(port=0).validate()

    @pytest.mark.parametrize("kwargs", [
        {"port": -1},
        {"port": 65536},
        {"max_workers": 0},
        {"buffer_size": 512},
        {"timeout": 0},
        {"log_format": "xml"},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            ServerConfig(**kwargs).validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("HTTP_HOST", "0.0.0.0")
        monkeypatch.setenv("HTTP_PORT", "9000")
        monkeypatch.setenv("HTTP_WORKERS", "4")
        monkeypatch.setenv("HTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("HTTP_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("HTTP_LOG_FORMAT", "json")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 9000
        assert config.max_workers == 4
        assert config.timeout == 2.5
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
