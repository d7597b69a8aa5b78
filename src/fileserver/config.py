"""
=============================================================================
CONFIGURATION
=============================================================================

Two configuration objects, one per layer:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ FileServerConfig   WHAT is served                                   │
    │                    serving root, fallback extensions, index file,   │
    │                    redirect and range switches                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │ ServerConfig       HOW it is served                                 │
    │                    host, port, timeouts, keep-alive, workers,       │
    │                    logging                                          │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    Priority (highest to lowest):

    1. Command-line arguments
       └── python -m fileserver ./public --port 3000 --ext html

    2. Environment variables
       └── HTTP_PORT=3000 FILESERVER_ROOT=./public python -m fileserver

    3. Default values (in these dataclasses)

Both objects are validated eagerly at startup: a bad port or a serving
root that does not exist should stop the process before it binds a socket,
not surface on the first request.
=============================================================================
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _normalize_root(root: str) -> str:
    """'/srv/www/' → '/srv/www'; '/' stays '/'."""
    stripped = str(root).rstrip("/")
    return stripped or "/"


def _normalize_extensions(extensions: Iterable[str]) -> Tuple[str, ...]:
    """('.html', 'htm', '') → ('html', 'htm')"""
    normalized = []
    for extension in extensions:
        extension = extension.strip().lstrip(".")
        if extension:
            normalized.append(extension)
    return tuple(normalized)


@dataclass(frozen=True)
class FileServerConfig:
    """
    What the static file handler serves, fixed for the handler's lifetime.

    Example:
        FileServerConfig(
            serving_root="./public",
            possible_extensions=("html", "htm"),  # /about → about.html
            serve_index_for_directory=True,       # /docs/ → docs/index.html
            redirect_on_directory=True,           # /docs  → 302 /docs/
            accept_ranges=True,                   # honour Range on GET
        )

    Values are normalized on construction: the root loses any trailing
    slash and extensions lose any leading dot.
    """

    serving_root: str

    possible_extensions: Tuple[str, ...] = ()
    """Tried in order when the path does not exist; first match wins."""

    serve_index_for_directory: bool = True
    redirect_on_directory: bool = True
    accept_ranges: bool = True

    index_file: str = "index.html"
    """File served for requests ending in '/'."""

    def __post_init__(self):
        object.__setattr__(self, "serving_root", _normalize_root(self.serving_root))
        object.__setattr__(
            self, "possible_extensions", _normalize_extensions(self.possible_extensions)
        )

    @classmethod
    def from_env(cls, serving_root: Optional[str] = None) -> "FileServerConfig":
        """
        Create configuration from environment variables.

            FILESERVER_ROOT            Serving root (default: current directory)
            FILESERVER_EXTENSIONS      Comma-separated, e.g. "html,htm"
            FILESERVER_INDEX_FILE      Index file name (default: index.html)
            FILESERVER_SERVE_INDEX     1/0 (default: 1)
            FILESERVER_REDIRECT        1/0 (default: 1)
            FILESERVER_ACCEPT_RANGES   1/0 (default: 1)

        An explicit serving_root argument overrides FILESERVER_ROOT.
        """
        extensions = os.getenv("FILESERVER_EXTENSIONS", "")
        return cls(
            serving_root=serving_root or os.getenv("FILESERVER_ROOT", "."),
            possible_extensions=tuple(extensions.split(",")),
            serve_index_for_directory=_env_bool("FILESERVER_SERVE_INDEX", True),
            redirect_on_directory=_env_bool("FILESERVER_REDIRECT", True),
            accept_ranges=_env_bool("FILESERVER_ACCEPT_RANGES", True),
            index_file=os.getenv("FILESERVER_INDEX_FILE", "index.html"),
        )

    def validate(self) -> None:
        """
        Fail fast on an unusable configuration.

        Raises:
            ValueError: If the serving root is not an existing directory or
                the index file name is not a plain file name.
        """
        if not Path(self.serving_root).is_dir():
            raise ValueError(f"Serving root is not a directory: {self.serving_root}")

        if not self.index_file or "/" in self.index_file:
            raise ValueError(f"index_file must be a plain file name, got {self.index_file!r}")


@dataclass
class ServerConfig:
    """
    Network and process settings for the HTTP server.

    Development:
        ServerConfig(host="127.0.0.1", port=8080, log_level="DEBUG")

    Production:
        ServerConfig(host="0.0.0.0", port=80, max_workers=32)
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """"127.0.0.1" for localhost only, "0.0.0.0" for all interfaces."""

    port: int = 8080
    """Port to listen on. 0 picks a free port (used by tests)."""

    backlog: int = 128
    """Maximum number of queued connections."""

    buffer_size: int = 8192
    """Size of each socket read in bytes."""

    timeout: Optional[float] = 30.0
    """Socket timeout in seconds. None blocks forever."""

    # ─────────────────────────────────────────────────────────────────────
    # HTTP SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    keep_alive: bool = True
    """Serve several requests per TCP connection (range-heavy media
    players open many)."""

    keep_alive_timeout: float = 5.0
    """Idle seconds before a kept-alive connection is closed."""

    max_request_size: int = 1024 * 1024
    """Maximum request size in bytes. A file server takes no uploads."""

    # ─────────────────────────────────────────────────────────────────────
    # WORKERS
    # ─────────────────────────────────────────────────────────────────────

    max_workers: int = 16
    """Threads serving connections concurrently."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    log_format: str = "text"
    """Access log format: 'text' or 'json'."""

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "FileServer/1.0"
    """Value of the Server header."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

            HTTP_HOST        Server host (default: 127.0.0.1)
            HTTP_PORT        Server port (default: 8080)
            HTTP_WORKERS     Worker threads (default: 16)
            HTTP_TIMEOUT     Socket timeout in seconds (default: 30)
            HTTP_LOG_LEVEL   Logging level (default: INFO)
            HTTP_LOG_FORMAT  text or json (default: text)
        """
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "8080")),
            max_workers=int(os.getenv("HTTP_WORKERS", "16")),
            timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("HTTP_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """Validate values at startup, not at first use."""
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"log_format must be 'text' or 'json', got {self.log_format!r}")
