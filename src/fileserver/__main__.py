"""
=============================================================================
COMMAND LINE INTERFACE
=============================================================================

    python -m fileserver [DIRECTORY] [options]
    fileserver [DIRECTORY] [options]          (installed console script)

Examples:

    python -m fileserver ./public
    python -m fileserver ./public --port 3000 --host 0.0.0.0
    python -m fileserver ./site --ext html --ext htm     # /about → about.html
    python -m fileserver ./media --prefix /media --max-age 86400
    python -m fileserver ./public --no-redirect --no-ranges -l DEBUG

Environment variables (see config.py) supply the defaults; flags win:

    FILESERVER_ROOT=./public HTTP_PORT=3000 python -m fileserver
    FILESERVER_EXTENSIONS=html,htm python -m fileserver ./site --ext php
=============================================================================
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import FileServerConfig, ServerConfig
from .files.headers import CacheHeadersSetter
from .handlers.static import StaticFileHandler
from .middleware import LoggingMiddleware
from .server import FileHTTPServer


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser.

    Defaults are read from the environment (FILESERVER_* and HTTP_*, see
    config.py), so a flag overrides its variable.

    Raises:
        ValueError: If a numeric environment variable is not a number.
    """
    file_defaults = FileServerConfig.from_env()
    server_defaults = ServerConfig.from_env()

    parser = argparse.ArgumentParser(
        prog="fileserver",
        description="Serve a directory over HTTP, with byte-range support",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fileserver ./public                   # http://127.0.0.1:8080/
  python -m fileserver ./public --prefix /static  # http://127.0.0.1:8080/static/
  python -m fileserver ./site --ext html          # /about serves about.html
        """,
    )

    parser.add_argument(
        "directory",
        nargs="?",
        default=file_defaults.serving_root,
        help="Directory to serve (default: FILESERVER_ROOT or the current directory)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=server_defaults.host,
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for containers)",
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=server_defaults.port,
        help="Port to listen on (default: 8080)",
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=server_defaults.max_workers,
        help="Worker threads (default: 16)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILE SERVING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--prefix",
        default="/",
        help="URL prefix to serve the directory under (default: /)",
    )
    parser.add_argument(
        "--ext",
        action="append",
        default=None,
        metavar="EXT",
        help="Fallback extension for missing paths; repeatable, tried in order",
    )
    parser.add_argument(
        "--no-index",
        action="store_true",
        default=not file_defaults.serve_index_for_directory,
        help="Do not serve index.html for paths ending in /",
    )
    parser.add_argument(
        "--no-redirect",
        action="store_true",
        default=not file_defaults.redirect_on_directory,
        help="Do not redirect directory paths to their trailing-slash form",
    )
    parser.add_argument(
        "--no-ranges",
        action="store_true",
        default=not file_defaults.accept_ranges,
        help="Ignore Range headers and announce Accept-Ranges: none",
    )
    parser.add_argument(
        "--max-age",
        type=int,
        default=None,
        metavar="SECONDS",
        help="Send Cache-Control, Last-Modified and ETag headers",
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING / META
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=server_defaults.log_level,
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=server_defaults.log_format,
        help="Access log format (default: text)",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"fileserver {__version__}",
    )

    # Not flags: environment values build_server falls back on
    parser.set_defaults(
        ext_from_env=list(file_defaults.possible_extensions),
        index_file=file_defaults.index_file,
        timeout=server_defaults.timeout,
    )

    return parser


def build_server(args: argparse.Namespace) -> FileHTTPServer:
    """
    Turn parsed arguments into a ready-to-run server.

    Raises:
        ValueError: If any configuration value is invalid.
    """
    file_config = FileServerConfig(
        serving_root=args.directory,
        possible_extensions=tuple(args.ext if args.ext is not None else args.ext_from_env),
        index_file=args.index_file,
        serve_index_for_directory=not args.no_index,
        redirect_on_directory=not args.no_redirect,
        accept_ranges=not args.no_ranges,
    )
    file_config.validate()

    server_config = ServerConfig(
        host=args.host,
        port=args.port,
        max_workers=args.workers,
        timeout=args.timeout,
        log_level=args.log_level,
        log_format=args.log_format,
    )

    headers_setter = None
    if args.max_age is not None:
        headers_setter = CacheHeadersSetter(max_age=args.max_age)

    server = FileHTTPServer(server_config)
    server.use(LoggingMiddleware(log_format=args.log_format))
    server.mount(args.prefix, StaticFileHandler(file_config, headers_setter=headers_setter))
    return server


def main(argv: Optional[List[str]] = None) -> int:
    try:
        parser = build_parser()
    except ValueError as e:
        print(f"fileserver: error: bad environment variable: {e}", file=sys.stderr)
        return 2

    args = parser.parse_args(argv)

    try:
        server = build_server(args)
    except ValueError as e:
        parser.error(str(e))

    server.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
