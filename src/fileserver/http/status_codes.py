"""
=============================================================================
HTTP STATUS CODES (RFC 7231, RFC 7233)
=============================================================================

Status codes a static file server answers with, plus their reason phrases.

    ┌────────────────────────────────────────────────────────────────────┐
    │                   STATUS CODES IN FILE SERVING                     │
    ├────────┬───────────────────────────────────────────────────────────┤
    │  200   │ Whole file sent (GET) or described (HEAD)                 │
    │  206   │ Range request fulfilled: one range, or several in a       │
    │        │ multipart/byteranges body                                 │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  302   │ Directory requested without trailing slash:               │
    │        │ /docs → /docs/                                            │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  400   │ Malformed request line or headers                         │
    │  404   │ Nothing to serve at this path                             │
    │  405   │ Route exists, method does not (only GET/HEAD serve files) │
    │  408   │ Client connected but never finished its request           │
    │  413   │ Request larger than the configured limit                  │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  500   │ File vanished or became unreadable mid-request            │
    │  503   │ No worker available to take the connection                │
    │  505   │ HTTP version other than 1.0 / 1.1                         │
    └────────┴───────────────────────────────────────────────────────────┘

416 Range Not Satisfiable is defined for completeness, but the file
handler never emits it: an unusable Range header falls back to 200.
=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.PARTIAL_CONTENT == 206
        True
        >>> HTTPStatus.PARTIAL_CONTENT.phrase
        'Partial Content'
    """

    # 2xx SUCCESS
    OK = 200
    NO_CONTENT = 204
    PARTIAL_CONTENT = 206                   # Range request fulfilled

    # 3xx REDIRECTION
    MOVED_PERMANENTLY = 301
    FOUND = 302                             # Trailing-slash redirect
    NOT_MODIFIED = 304

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    REQUEST_TIMEOUT = 408
    PAYLOAD_TOO_LARGE = 413
    RANGE_NOT_SATISFIABLE = 416

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    SERVICE_UNAVAILABLE = 503
    HTTP_VERSION_NOT_SUPPORTED = 505

    @property
    def phrase(self) -> str:
        """
        Reason phrase for the status line:

            HTTP/1.1 206 Partial Content
                     ─── ───────────────
                      │         │
                      │         └── Reason phrase
                      └──────────── Status code
        """
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_success(self) -> bool:
        """2xx"""
        return 200 <= self < 300

    @property
    def is_redirect(self) -> bool:
        """3xx"""
        return 300 <= self < 400

    @property
    def is_client_error(self) -> bool:
        """4xx"""
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        """5xx"""
        return 500 <= self < 600

    @property
    def is_error(self) -> bool:
        """4xx or 5xx; useful for log levels."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.PARTIAL_CONTENT: "Partial Content",

    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.FOUND: "Found",
    HTTPStatus.NOT_MODIFIED: "Not Modified",

    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.REQUEST_TIMEOUT: "Request Timeout",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.RANGE_NOT_SATISFIABLE: "Range Not Satisfiable",

    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}
