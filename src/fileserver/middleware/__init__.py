"""
=============================================================================
MIDDLEWARE
=============================================================================

Cross-cutting request processing around the router:

    Request → [LoggingMiddleware] → Router → StaticFileHandler
    Response ← [LoggingMiddleware] ←───────────────┘

    server = FileHTTPServer()
    server.use(LoggingMiddleware(log_format="json"))

Each middleware is a (request, next) → response callable. It may act
before calling next(), after it, or return early without calling it.
=============================================================================
"""

from .base import Middleware, MiddlewarePipeline, FunctionMiddleware, function_middleware
from .logging import LoggingMiddleware, RequestLog

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "FunctionMiddleware",
    "function_middleware",
    "LoggingMiddleware",
    "RequestLog",
]
