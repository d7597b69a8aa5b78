"""
=============================================================================
CORE NETWORKING
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ SocketServer (socket_server.py)                                     │
    │   listening socket, accept loop, SIGINT/SIGTERM → shutdown          │
    └───────────────────────────────┬─────────────────────────────────────┘
                                    │ one Connection per client
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │ Connection (connection.py)                                          │
    │   frames requests out of the byte stream, timeouts, graceful close  │
    └─────────────────────────────────────────────────────────────────────┘

Worker threads come from concurrent.futures.ThreadPoolExecutor, owned by
FileHTTPServer.
=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState, RequestTooLargeError

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
    "RequestTooLargeError",
]
