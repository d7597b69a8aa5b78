"""
=============================================================================
URL ROUTER
=============================================================================

Path-based routing with support for:
- Static paths: /health, /static
- Dynamic parameters: /users/:id
- Wildcard paths: /static/*path
- Method-based routing: GET, HEAD, ...

=============================================================================
ROUTING A FILE SERVER MOUNT
=============================================================================

    Mounting a directory at /static registers:

    ┌────────────────────────────────────────────────────────────────────┐
    │  GET   /static          → file handler   (matched_path "/static")   │
    │  HEAD  /static          → file handler                              │
    │  GET   /static/*path    → file handler   (matched_path              │
    │  HEAD  /static/*path    → file handler    "/static/*path")          │
    └────────────────────────────────────────────────────────────────────┘

    GET /static/css/site.css
        → path_params  = {"path": "css/site.css"}
        → matched_path = "/static/*path"

The router records the pattern that matched on the request as
`matched_path`. The file handler cuts that pattern at "*" to learn the
mount prefix, so it never needs to know where it was mounted.

=============================================================================
TRAILING SLASHES
=============================================================================

Trailing slashes are significant for a file server: "/static/docs"
names a directory that should be redirected, "/static/docs/" asks for
its index file. Request paths are therefore matched exactly as received.
Static patterns accept an optional trailing slash ("/static" matches
"/static" and "/static/") and wildcards capture it ("/static/*path"
matches "/static/docs/" with path="docs/").
=============================================================================
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Dict, List
import logging
import re

from .request import HTTPRequest
from .response import HTTPResponse, not_found, method_not_allowed


logger = logging.getLogger(__name__)


# Handler: takes a request, returns a response
Handler = Callable[[HTTPRequest], HTTPResponse]


@dataclass
class Route:
    """
    A registered route.

        Route(
            path="/static/*path",     # URL pattern
            method="GET",             # HTTP method filter (None = any)
            handler=static_handler,
            _pattern=<compiled>,
            _param_names=["path"],
        )
    """

    path: str
    method: Optional[str]
    handler: Handler

    _pattern: Optional[re.Pattern] = field(default=None, repr=False)
    _param_names: List[str] = field(default_factory=list, repr=False)


@dataclass
class RouteMatch:
    """A matched route and the parameters extracted from the path."""
    route: Route
    params: Dict[str, str]


class Router:
    """
    HTTP request router.

    First-registered, first-matched:

        router = Router()

        @router.get("/health")
        def health(request):
            ...

        router.add_route("/static/*path", static_handler, method="GET")
    """

    def __init__(self):
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: Optional[str] = None,
    ) -> Route:
        """
        Register a route.

        Args:
            path: URL pattern (e.g., /static/*path)
            handler: Called with the request, returns the response
            method: HTTP method (None for any)
        """
        pattern, param_names = self._compile_pattern(path)

        route = Route(
            path=path,
            method=method.upper() if method else None,
            handler=handler,
            _pattern=pattern,
            _param_names=param_names,
        )
        self._routes.append(route)
        logger.debug(f"Registered route {route.method or 'ANY'} {path}")
        return route

    def _compile_pattern(self, path: str) -> tuple[re.Pattern, List[str]]:
        """
        Compile a path pattern into a regex.

            "/users/:id"      →  ^/users/(?P<id>[^/]+)/?$
            "/static/*path"   →  ^/static/(?P<path>.*)$
            "/"               →  ^/$

        A wildcard must be the last segment; anything after it is ignored.
        """
        param_names: List[str] = []
        regex_parts = ["^"]
        wildcard = False

        for segment in path.split("/"):
            if not segment:
                continue

            regex_parts.append("/")

            if segment.startswith(":"):
                # :id → (?P<id>[^/]+)
                param_name = segment[1:]
                param_names.append(param_name)
                regex_parts.append(f"(?P<{param_name}>[^/]+)")

            elif segment.startswith("*"):
                # *path → (?P<path>.*), trailing slash included
                param_name = segment[1:] or "wildcard"
                param_names.append(param_name)
                regex_parts.append(f"(?P<{param_name}>.*)")
                wildcard = True
                break

            else:
                regex_parts.append(re.escape(segment))

        if len(regex_parts) == 1:
            regex_parts.append("/")
        elif not wildcard:
            regex_parts.append("/?")

        regex_parts.append("$")
        # DOTALL: decoded paths may carry any character, newlines included
        pattern = re.compile("".join(regex_parts), re.DOTALL)

        return pattern, param_names

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching method and path.

        The path is matched as-is; trailing slashes are not stripped.
        """
        for route in self._routes:
            if route.method and route.method != method.upper():
                continue

            if route._pattern:
                match = route._pattern.match(path)
                if match:
                    return RouteMatch(route=route, params=match.groupdict())

        return None

    def get_allowed_methods(self, path: str) -> List[str]:
        """Methods registered for a path, for the Allow header of a 405."""
        methods = set()

        for route in self._routes:
            if route._pattern and route._pattern.match(path):
                if route.method:
                    methods.add(route.method)
                else:
                    return ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]

        return sorted(methods)

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to its handler.

        Sets request.path_params and request.matched_path before calling
        the handler. Answers 405 when the path is routed for other methods
        only, 404 when it is not routed at all.
        """
        match = self.match(request.method, request.path)

        if match:
            request.path_params = match.params
            request.matched_path = match.route.path
            return match.route.handler(request)

        allowed = self.get_allowed_methods(request.path)
        if allowed:
            return method_not_allowed(allowed)

        return not_found(f"No route matches {request.path}")

    # =========================================================================
    # DECORATORS
    # =========================================================================

    def route(self, path: str, method: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator form of add_route()."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method)
            return handler
        return decorator

    def get(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, "GET")

    def head(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, "HEAD")

    def routes(self) -> List[Route]:
        """All registered routes, in matching order."""
        return list(self._routes)
