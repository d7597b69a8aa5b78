"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds HTTP/1.1 responses with proper formatting per RFC 7230.

=============================================================================
RESPONSE SHAPES A FILE SERVER PRODUCES
=============================================================================

    FULL FILE (GET)                     SINGLE RANGE (GET + Range)
    ┌───────────────────────────────┐   ┌───────────────────────────────┐
    │ HTTP/1.1 200 OK               │   │ HTTP/1.1 206 Partial Content  │
    │ Accept-Ranges: bytes          │   │ Accept-Ranges: bytes          │
    │ Content-Type: text/css; ...   │   │ Content-Type: video/mp4       │
    │ Content-Length: 5120          │   │ Content-Range: bytes 0-99/5120│
    │                               │   │ Content-Length: 100           │
    │ <5120 bytes>                  │   │                               │
    └───────────────────────────────┘   │ <100 bytes>                   │
                                        └───────────────────────────────┘
    HEAD                                 DIRECTORY WITHOUT SLASH
    ┌───────────────────────────────┐   ┌───────────────────────────────┐
    │ HTTP/1.1 200 OK               │   │ HTTP/1.1 302 Found            │
    │ Content-Length: 5120          │   │ Location: /docs/              │
    │ (no body)                     │   │                               │
    └───────────────────────────────┘   └───────────────────────────────┘

The response object is mutable: the file handler sets Accept-Ranges,
hands the response to a header-customization hook, and only then fills in
status and body.

=============================================================================
HEADER INJECTION
=============================================================================

Header values end at CRLF on the wire. A value that contains CR or LF
would let whoever controls it append headers or even a second response,
so set_header() refuses such values with ValueError.
=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Union
import json

from .status_codes import HTTPStatus
from .mime_types import get_content_type


def _check_header(name: str, value: str) -> None:
    if any(c in name for c in "\r\n:") or any(c in value for c in "\r\n"):
        raise ValueError(f"Invalid characters in header {name!r}: {value!r}")


@dataclass
class HTTPResponse:
    """
    An HTTP response.

    Example:
        response = HTTPResponse(status=HTTPStatus.OK)
        response.set_header("Accept-Ranges", "bytes")
        response.set_body(b"...")
        wire = response.to_bytes()
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """'HTTP/1.1 206 Partial Content'"""
        return f"{self.version} {self.status.value} {self.status.phrase}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """
        Set a header, replacing any previous value.

        Raises:
            ValueError: If the name or value contains CR/LF.
        """
        _check_header(name, value)
        self.headers[name] = value
        return self

    def set_content_type(self, content_type: str) -> "HTTPResponse":
        return self.set_header("Content-Type", content_type)

    def set_status(self, status: HTTPStatus) -> "HTTPResponse":
        self.status = status
        return self

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        if isinstance(body, str):
            self.body = body.encode("utf-8")
        else:
            self.body = body
        return self

    def to_bytes(
        self,
        server_name: str = "FileServer/1.0",
        include_body: bool = True,
    ) -> bytes:
        """
        Serialize to wire format.

        Content-Length, Date and Server are added when missing. For HEAD
        responses pass include_body=False: the headers (including a
        Content-Length that describes the full entity) are sent, the body
        is not.
        """
        response_headers = dict(self.headers)

        if "Content-Length" not in response_headers:
            response_headers["Content-Length"] = str(len(self.body))

        if "Date" not in response_headers:
            response_headers["Date"] = format_http_date(datetime.now(timezone.utc))

        if "Server" not in response_headers:
            response_headers["Server"] = server_name

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("latin-1") + b"\r\n"

        if not include_body:
            return header_bytes
        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTP responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .header("Accept-Ranges", "bytes")
            .file(data, "clip.mp4")
            .build())
    """

    def __init__(self, server_name: str = "FileServer/1.0"):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""
        self._server_name = server_name

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """
        Set a header.

        Raises:
            ValueError: If the name or value contains CR/LF.
        """
        _check_header(name, value)
        self._headers[name] = value
        return self

    def headers(self, headers: Dict[str, str]) -> "ResponseBuilder":
        for name, value in headers.items():
            self.header(name, value)
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        if isinstance(body, str):
            self._body = body.encode("utf-8")
        else:
            self._body = body
        return self

    def text(self, text: str, content_type: str = "text/plain; charset=utf-8") -> "ResponseBuilder":
        self._body = text.encode("utf-8")
        self._headers["Content-Type"] = content_type
        return self

    def json(self, data: Any) -> "ResponseBuilder":
        self._body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self._headers["Content-Type"] = "application/json; charset=utf-8"
        return self

    def file(self, content: bytes, filename: str) -> "ResponseBuilder":
        """File content with a Content-Type guessed from the file name."""
        self._body = content
        self._headers["Content-Type"] = get_content_type(filename)
        return self

    def redirect(self, location: str, permanent: bool = False) -> "ResponseBuilder":
        """
        Redirect to another location.

        302 Found by default; 301 Moved Permanently when permanent.

        Raises:
            ValueError: If the location cannot be sent as a header value.
        """
        self.header("Location", location)
        self._status = HTTPStatus.MOVED_PERMANENTLY if permanent else HTTPStatus.FOUND
        return self

    def cache(self, max_age: int = 3600) -> "ResponseBuilder":
        self._headers["Cache-Control"] = f"public, max-age={max_age}"
        return self

    def close_connection(self) -> "ResponseBuilder":
        self._headers["Connection"] = "close"
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=self._headers,
            body=self._body,
        )

    def to_bytes(self) -> bytes:
        return self.build().to_bytes(self._server_name)


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231):

        Wed, 15 Jun 2024 10:00:00 GMT
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def redirect(location: str, permanent: bool = False) -> HTTPResponse:
    return ResponseBuilder().redirect(location, permanent).build()


def bad_request(message: str = "Bad Request") -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.BAD_REQUEST).json({"error": message}).build()


def not_found(message: str = "Not Found") -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).json({"error": message}).build()


def method_not_allowed(allowed_methods: list[str]) -> HTTPResponse:
    return (ResponseBuilder()
        .status(HTTPStatus.METHOD_NOT_ALLOWED)
        .header("Allow", ", ".join(allowed_methods))
        .json({"error": "Method Not Allowed", "allowed": allowed_methods})
        .build())


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).json({"error": message}).build()
