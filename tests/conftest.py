"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator, Optional

import pytest

from fileserver import FileHTTPServer, FileServerConfig, ServerConfig, StaticFileHandler
from fileserver.http import HTTPRequest


# 1000 bytes where byte i == i % 256, so any range is easy to check
SAMPLE_BYTES = bytes(i % 256 for i in range(1000))


@pytest.fixture
def sample_bytes() -> bytes:
    return SAMPLE_BYTES


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request for a file."""
    return (
        b"GET /static/css/my%20site.css?v=3 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/css\r\n"
        b"Connection: keep-alive\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_range_request() -> bytes:
    """Sample HTTP GET request with a multi-range header."""
    return (
        b"GET /static/video.mp4 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Range: bytes=0-99,200-\r\n"
        b"\r\n"
    )


@pytest.fixture
def serving_root(tmp_path: Path) -> Path:
    """
    A populated serving root:

        www/
        ├── index.html
        ├── data.bin          (1000 bytes, see SAMPLE_BYTES)
        ├── style.css
        ├── page.htm
        ├── docs/
        │   └── index.html
        ├── empty/
        └── dir.html/         (a directory with a file-like name)

    A sibling www-evil/secret.txt sits next to the root.
    """
    root = tmp_path / "www"
    root.mkdir()

    (root / "index.html").write_text("<h1>home</h1>")
    (root / "data.bin").write_bytes(SAMPLE_BYTES)
    (root / "style.css").write_text("body { color: red; }")
    (root / "page.htm").write_text("<p>htm page</p>")

    (root / "docs").mkdir()
    (root / "docs" / "index.html").write_text("<h1>docs</h1>")
    (root / "empty").mkdir()
    (root / "dir.html").mkdir()

    evil = tmp_path / "www-evil"
    evil.mkdir()
    (evil / "secret.txt").write_text("secret")

    return root


@pytest.fixture
def file_config(serving_root: Path) -> FileServerConfig:
    return FileServerConfig(serving_root=str(serving_root))


@pytest.fixture
def handler(file_config: FileServerConfig) -> StaticFileHandler:
    return StaticFileHandler(file_config)


def _make_request(
    path: str,
    method: str = "GET",
    matched_path: str = "/static/*path",
    range_header: Optional[str] = None,
) -> HTTPRequest:
    headers = {}
    if range_header is not None:
        headers["range"] = range_header
    return HTTPRequest(
        method=method,
        path=path,
        raw_path=path,
        headers=headers,
        matched_path=matched_path,
    )


@pytest.fixture
def make_request():
    """Factory for requests as the router hands them to the file handler."""
    return _make_request


class LiveServer:
    """A FileHTTPServer running in a background thread."""

    def __init__(self, server: FileHTTPServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()
        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.stop()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=10.0)

    def request(self, raw: bytes) -> bytes:
        """Send raw request bytes and read until the server closes."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as sock:
            sock.sendall(raw)
            chunks = []
            while True:
                chunk = sock.recv(65536)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


@pytest.fixture
def live_server(serving_root: Path) -> Generator[LiveServer, None, None]:
    """The serving root mounted at /static on a free port."""
    server = FileHTTPServer(ServerConfig(
        host="127.0.0.1",
        port=0,
        max_workers=4,
        timeout=5.0,
        keep_alive_timeout=1.0,
        log_level="WARNING",
    ))
    config = FileServerConfig(
        serving_root=str(serving_root),
        possible_extensions=("html", "htm"),
    )
    server.mount("/static", StaticFileHandler(config))

    live = LiveServer(server)
    live.start()

    yield live

    live.stop()
