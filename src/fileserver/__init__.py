"""
=============================================================================
FILESERVER - Static File Serving With Byte Ranges
=============================================================================

Serves a directory over HTTP/1.1: path resolution with traversal
protection, extension fallback, directory index and redirect, and
RFC 7233 range requests (single 206 or multipart/byteranges).

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    fileserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m fileserver)
    ├── server.py            # FileHTTPServer: sockets + router + middleware
    ├── config.py            # FileServerConfig, ServerConfig
    ├── errors.py            # FileServerError, RedirectError
    ├── files/               # The file serving core
    │   ├── resolver.py      # request path → candidate path
    │   ├── safety.py        # stay inside the serving root
    │   ├── probe.py         # stat, extension fallback
    │   ├── directory.py     # trailing-slash redirect
    │   ├── ranges.py        # Range header parsing
    │   ├── partial.py       # 206 single / multipart bodies
    │   └── headers.py       # header customization hook
    ├── handlers/
    │   └── static.py        # StaticFileHandler: the dispatch
    ├── http/                # HTTP protocol components
    ├── core/                # Sockets and connections
    └── middleware/          # Middleware pipeline, access logging

=============================================================================
QUICK START
=============================================================================

    from fileserver import FileHTTPServer, ServerConfig, serve_static
    from fileserver.middleware import LoggingMiddleware

    server = FileHTTPServer(ServerConfig(port=8080))
    server.use(LoggingMiddleware())
    server.mount("/static", serve_static("./public", possible_extensions=("html",)))
    server.run()

Or without the server, on a request you already have:

    handler = serve_static("./public")
    response = handler.handle(request)   # HTTPResponse or None

=============================================================================
"""

__version__ = "1.0.0"

from .config import FileServerConfig, ServerConfig
from .errors import FileServerError, RedirectError
from .handlers.static import StaticFileHandler, serve_static
from .server import FileHTTPServer

__all__ = [
    "FileHTTPServer",
    "FileServerConfig",
    "ServerConfig",
    "StaticFileHandler",
    "serve_static",
    "FileServerError",
    "RedirectError",
    "__version__",
]
