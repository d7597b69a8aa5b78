"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Parses raw HTTP/1.x request bytes into HTTPRequest objects (RFC 7230).

=============================================================================
WHAT THE FILE SERVER NEEDS FROM A REQUEST
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  GET /static/my%20clip.mp4?v=2 HTTP/1.1\r\n                         │
    │  Host: localhost:8080\r\n                                           │
    │  Range: bytes=0-1023\r\n                                            │
    │  \r\n                                                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  method        "GET"                 → GET/HEAD only, HEAD: no 206  │
    │  raw_path      "/static/my%20clip.mp4"  → mapped onto the disk      │
    │  path          "/static/my clip.mp4" → used for route matching      │
    │  headers       {"range": "bytes=0-1023", ...}                       │
    │  matched_path  "/static/*path"       → set by the router            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Two forms of the path are kept on purpose. Routing works on the decoded
path, but filesystem resolution decodes the raw path itself so it can
fall back to the undecoded text when decoding fails.

=============================================================================
SECURITY NOTE
=============================================================================

The parser does NOT reject ".." segments. Keeping the request inside the
serving root is the job of the file handler's safety validator, which
declines silently instead of answering 400 and revealing that a
traversal attempt was noticed.
=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict
from urllib.parse import parse_qs, urlsplit, unquote
import re


class HTTPParseError(Exception):
    """
    Raised when HTTP request parsing fails.

    Carries the status code to answer with:

        400 Bad Request                - Malformed request syntax
        405 Method Not Allowed         - Unknown method
        413 Payload Too Large          - Request exceeds size limit
        505 HTTP Version Not Supported - Unknown HTTP version
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    Header names are stored lower-case (HTTP headers are case-insensitive),
    so look them up with get_header() or lower-case keys.
    """

    method: str                          # GET, HEAD, ...
    path: str                            # Percent-decoded path, no query
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""

    # Path exactly as received; defaults to `path` for hand-built requests
    raw_path: Optional[str] = None

    # Router-injected
    path_params: Dict[str, str] = field(default_factory=dict)
    matched_path: str = "/"              # Route pattern, e.g. /static/*path

    client_address: tuple[str, int] = ("", 0)
    raw: bytes = b""

    def __post_init__(self):
        if self.raw_path is None:
            self.raw_path = self.path

    @property
    def host(self) -> str:
        return self.headers.get("host", "")

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    @property
    def range(self) -> Optional[str]:
        """The Range header value, if the client sent one."""
        return self.headers.get("range")

    @property
    def content_length(self) -> int:
        """Content-Length as an integer (0 when missing or invalid)."""
        try:
            return int(self.headers.get("content-length", 0))
        except ValueError:
            return 0

    @property
    def is_keep_alive(self) -> bool:
        """
        Whether the connection should stay open after the response.

        HTTP/1.1 keeps alive unless "Connection: close";
        HTTP/1.0 closes unless "Connection: keep-alive".
        """
        connection = self.headers.get("connection", "").lower()

        if self.version == "HTTP/1.1":
            return connection != "close"
        return connection == "keep-alive"

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a query parameter."""
        values = self.query_params.get(name, [])
        return values[0] if values else default


class RequestParser:
    """
    Parses raw HTTP request bytes into HTTPRequest objects.

    =========================================================================
    PARSING ALGORITHM
    =========================================================================

        1. Check size limit
        2. Split at \\r\\n\\r\\n into header section and body
        3. Parse the request line: METHOD SP REQUEST-URI SP HTTP-VERSION
        4. Parse header lines into a lower-case dict
        5. Cut the body to Content-Length

    =========================================================================
    """

    REQUEST_LINE_PATTERN = re.compile(r"^([A-Z]+) ([^ ]+) (HTTP/\d\.\d)$")
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    VALID_METHODS = {
        "GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS",
    }

    def __init__(self, max_request_size: int = 10 * 1024 * 1024):
        self.max_request_size = max_request_size

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse raw HTTP request data.

        Raises:
            HTTPParseError: If the request is malformed.
        """
        if len(data) > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {len(data)} bytes",
                status_code=413
            )

        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        header_section = data[:header_end].decode("latin-1")
        body = data[header_end + 4:]

        lines = header_section.split("\r\n")
        method, raw_path, query_params, version = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        try:
            content_length = int(headers.get("content-length", 0))
        except ValueError:
            raise HTTPParseError("Invalid Content-Length header")

        if len(body) < content_length:
            raise HTTPParseError(
                f"Incomplete body: expected {content_length} bytes, got {len(body)}"
            )

        return HTTPRequest(
            method=method,
            path=unquote(raw_path),
            raw_path=raw_path,
            version=version,
            headers=headers,
            query_params=query_params,
            body=body[:content_length],
            client_address=client_address,
            raw=data,
        )

    def _parse_request_line(
        self,
        line: str
    ) -> tuple[str, str, Dict[str, list[str]], str]:
        """
        Split "GET /path?query HTTP/1.1" into its parts.

        Returns:
            (method, raw_path, query_params, version)
        """
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line!r}")

        method, uri, version = match.groups()

        if method not in self.VALID_METHODS:
            raise HTTPParseError(f"Invalid method: {method}", status_code=405)

        if version not in ("HTTP/1.0", "HTTP/1.1"):
            raise HTTPParseError(
                f"Unsupported HTTP version: {version}",
                status_code=505
            )

        # Keep the path percent-encoded; the file handler decodes it
        parsed = urlsplit(uri)
        raw_path = parsed.path or "/"
        query_params = parse_qs(parsed.query, keep_blank_values=True)

        return method, raw_path, query_params, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Parse header lines into a dict with lower-case names.

        Folded continuation lines are joined to the previous header, and
        repeated headers are combined with ", " (RFC 7230 §3.2.2).
        """
        headers: Dict[str, str] = {}
        current_name = None

        for line in lines:
            if not line:
                continue

            if line[0] in (" ", "\t"):
                if current_name is not None:
                    headers[current_name] += " " + line.strip()
                continue

            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue  # lenient: skip malformed lines

            name, value = match.groups()
            name = name.strip().lower()
            value = value.strip()
            current_name = name

            if name in headers:
                headers[name] += ", " + value
            else:
                headers[name] = value

        return headers


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
    max_size: int = 10 * 1024 * 1024
) -> HTTPRequest:
    """Parse one request with a throwaway RequestParser."""
    return RequestParser(max_request_size=max_size).parse(data, client_address)
