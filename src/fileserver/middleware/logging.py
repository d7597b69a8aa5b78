"""
=============================================================================
ACCESS LOGGING MIDDLEWARE
=============================================================================

One line per request on the "fileserver.access" logger.

    TEXT (Apache-like):
    127.0.0.1 - - [15/Jun/2024:10:00:00 +0000] "GET /static/clip.mp4" 206 1024 0.41ms range="bytes=0-1023"

    JSON (for log aggregators):
    {"request_id": "3f2a9c1b", "method": "GET", "path": "/static/clip.mp4",
     "status_code": 206, "content_length": 1024, "range": "bytes=0-1023", ...}

The Range header is logged because it explains 206 responses and short
bodies; "-" / null when the client sent none.

The logger is namespaced so it can be routed separately:

    logging.getLogger("fileserver.access").addHandler(file_handler)
=============================================================================
"""

import json
import logging
import time
import uuid
from dataclasses import asdict, dataclass
from typing import Iterable, Optional

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("fileserver.access")


@dataclass
class RequestLog:
    """One access log entry."""

    request_id: str
    method: str
    path: str
    query: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int             # Body bytes sent (0 for HEAD)
    duration_ms: float
    timestamp: str
    range: Optional[str] = None     # Range header, if any

    @classmethod
    def from_exchange(
        cls,
        request: HTTPRequest,
        response: HTTPResponse,
        request_id: str,
        duration_ms: float,
    ) -> "RequestLog":
        return cls(
            request_id=request_id,
            method=request.method,
            path=request.path,
            query=str(request.query_params) if request.query_params else "",
            client_ip=request.client_address[0],
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=0 if request.method == "HEAD" else len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
            range=request.range,
        )

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        parts = [
            f"{self.client_ip} - - [{self.timestamp}]",
            f'"{self.method} {self.path}"',
            str(self.status_code),
            str(self.content_length),
            f"{self.duration_ms:.2f}ms",
        ]
        if self.range:
            parts.append(f'range="{self.range}"')
        return " ".join(parts)


class LoggingMiddleware(Middleware):
    """
    Access logging middleware.

    Add it first so its timing covers the whole chain:

        pipeline.add(LoggingMiddleware(log_format="json"))

    Args:
        log_format: "text" or "json".
        include_request_id: Add an X-Request-ID header to each response.
        log_level: Level access lines are logged at.
        skip_paths: Paths not to log.
    """

    FORMATTERS = {
        "text": RequestLog.to_text,
        "json": lambda entry: json.dumps(entry.to_dict()),
    }

    def __init__(
        self,
        log_format: str = "text",
        include_request_id: bool = True,
        log_level: int = logging.INFO,
        skip_paths: Optional[Iterable[str]] = None,
    ):
        if log_format not in self.FORMATTERS:
            raise ValueError(f"log_format must be 'text' or 'json', got {log_format!r}")
        self._format = self.FORMATTERS[log_format]
        self.include_request_id = include_request_id
        self.log_level = log_level
        self.skip_paths = frozenset(skip_paths or ())

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        request_id = uuid.uuid4().hex[:8]
        started = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            logger.error(
                f"{request_id} {request.method} {request.path} failed after "
                f"{self._elapsed_ms(started):.2f}ms: {type(e).__name__}: {e}"
            )
            raise

        if request.path not in self.skip_paths:
            entry = RequestLog.from_exchange(
                request, response, request_id, self._elapsed_ms(started)
            )
            logger.log(self.log_level, self._format(entry))

        if self.include_request_id:
            response.set_header("X-Request-ID", request_id)

        return response

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return (time.perf_counter() - started) * 1000
