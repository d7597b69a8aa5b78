"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

The HTTP/1.1 plumbing the file server sits on: raw bytes in, structured
messages out, and back again.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST PARSER (request.py)                                         │
    │   b"GET /static/a%20b.txt HTTP/1.1\r\nRange: bytes=0-9\r\n\r\n"     │
    │   → HTTPRequest(method="GET", path="/static/a b.txt",               │
    │                 raw_path="/static/a%20b.txt", ...)                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │ ROUTER (router.py)                                                  │
    │   GET /static/a b.txt  → handler, matched_path="/static/*path"      │
    ├─────────────────────────────────────────────────────────────────────┤
    │ RESPONSE (response.py)                                              │
    │   HTTPResponse(status=206, headers={...}, body=b"...")              │
    │   → b"HTTP/1.1 206 Partial Content\r\n..."                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │ STATUS CODES (status_codes.py)  200, 206, 302, 404, 500, ...        │
    │ MIME TYPES (mime_types.py)      .mp4 → video/mp4                    │
    └─────────────────────────────────────────────────────────────────────┘
=============================================================================
"""

from .request import HTTPRequest, RequestParser, HTTPParseError, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    format_http_date,
    redirect,            # 301/302 Redirect
    bad_request,         # 400 Bad Request
    not_found,           # 404 Not Found
    method_not_allowed,  # 405 Method Not Allowed
    internal_error,      # 500 Internal Server Error
)
from .router import Router, Route, RouteMatch
from .status_codes import HTTPStatus
from .mime_types import get_mime_type, get_content_type

__all__ = [
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "parse_request",

    "HTTPResponse",
    "ResponseBuilder",
    "format_http_date",
    "redirect",
    "bad_request",
    "not_found",
    "method_not_allowed",
    "internal_error",

    "Router",
    "Route",
    "RouteMatch",

    "HTTPStatus",

    "get_mime_type",
    "get_content_type",
]
