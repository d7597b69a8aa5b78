"""
=============================================================================
MIDDLEWARE BASE CLASSES
=============================================================================

Middleware wraps the router: it sees every request on the way in and every
response on the way out, whether the file handler served a file, a 206,
a redirect or a 404.

    pipeline.add(LoggingMiddleware())     # first added = outermost

    ┌─────────────────────────────────────────────────────────┐
    │  LoggingMiddleware                                      │
    │  ┌───────────────────────────────────────────────────┐  │
    │  │  ...                                              │  │
    │  │  ┌─────────────────────────────────────────────┐  │  │
    │  │  │          FINAL HANDLER (router.handle)      │  │  │
    │  │  └─────────────────────────────────────────────┘  │  │
    │  └───────────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────────┘

Requests flow inward in the order middleware was added; responses flow
back outward in reverse.
=============================================================================
"""

from abc import ABC, abstractmethod
from functools import partial
from typing import Callable, List, Optional, Tuple
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# The next middleware, or the final handler
NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    Base class for middleware.

        class ServerTiming(Middleware):
            def __call__(self, request, next):
                start = time.perf_counter()
                response = next(request)          # continue the chain
                elapsed = (time.perf_counter() - start) * 1000
                response.set_header("Server-Timing", f"app;dur={elapsed:.1f}")
                return response

    Returning without calling next() short-circuits the chain. The pipeline
    passes the next handler by keyword, so the parameter must be named next.
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        pass

    @property
    def name(self) -> str:
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Chains middleware around a final handler.

        pipeline = MiddlewarePipeline()
        pipeline.add(LoggingMiddleware())
        handler = pipeline.wrap(router.handle)
        response = handler(request)
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    @property
    def middleware(self) -> Tuple[Middleware, ...]:
        """Registered middleware, outermost first."""
        return tuple(self._middleware)

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Append middleware; the first added is the outermost."""
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Bind every middleware around a handler.

        [MW1, MW2] becomes MW1(request, next=MW2(..., next=handler)), so
        binding starts from the innermost.
        """
        for middleware in reversed(self._middleware):
            handler = partial(middleware, next=handler)
        return handler


class FunctionMiddleware(Middleware):
    """
    Wraps a plain (request, next) → response function as middleware.

        def no_store(request, next):
            response = next(request)
            response.set_header("Cache-Control", "no-store")
            return response

        pipeline.add(FunctionMiddleware(no_store))
    """

    def __init__(
        self,
        func: Callable[[HTTPRequest, NextHandler], HTTPResponse],
        name: Optional[str] = None,
    ):
        self._func = func
        self._name = name or func.__name__

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        return self._func(request, next)

    @property
    def name(self) -> str:
        return self._name


def function_middleware(
    func: Callable[[HTTPRequest, NextHandler], HTTPResponse]
) -> FunctionMiddleware:
    """Decorator form of FunctionMiddleware."""
    return FunctionMiddleware(func)
