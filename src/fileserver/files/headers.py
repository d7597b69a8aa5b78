"""
=============================================================================
RESPONSE HEADER CUSTOMIZATION
=============================================================================

A strategy object the file handler calls once per served file, after
Accept-Ranges is set and before the body is produced:

    setter.set_custom_response_headers(response, file_path, file_info)

Whatever it sets sticks. In particular a Content-Type chosen here wins
over the handler's own content-type lookup:

    ┌──────────────────────────────────────────────────────────────────┐
    │  1. Accept-Ranges: bytes | none        (handler)                 │
    │  2. set_custom_response_headers(...)   (this hook, exactly once) │
    │  3. Content-Type (if still unset),     (handler)                 │
    │     Content-Range, body                                          │
    └──────────────────────────────────────────────────────────────────┘

Conditional requests (If-None-Match, If-Modified-Since) are not
evaluated. CacheHeadersSetter only announces validators.
=============================================================================
"""

from datetime import datetime, timezone

from ..http.response import HTTPResponse, format_http_date
from .probe import FileInfo


class ResponseHeadersSetter:
    """
    Base strategy: sets nothing.

    Subclass and override set_custom_response_headers().
    """

    def set_custom_response_headers(
        self,
        response: HTTPResponse,
        file_path: str,
        file_info: FileInfo,
    ) -> None:
        pass


class CacheHeadersSetter(ResponseHeadersSetter):
    """
    Adds caching headers for static assets.

        Cache-Control: public, max-age=3600
        Last-Modified: Wed, 15 Jun 2024 10:00:00 GMT
        ETag: W/"1718445600-5120"

    The ETag is weak because it is derived from mtime and size, not from
    the file content.
    """

    def __init__(self, max_age: int = 3600, etag: bool = True, last_modified: bool = True):
        if max_age < 0:
            raise ValueError(f"max_age must be >= 0, got {max_age}")
        self.max_age = max_age
        self.etag = etag
        self.last_modified = last_modified

    def set_custom_response_headers(
        self,
        response: HTTPResponse,
        file_path: str,
        file_info: FileInfo,
    ) -> None:
        response.set_header("Cache-Control", f"public, max-age={self.max_age}")

        if self.last_modified and file_info.modified_time:
            modified = datetime.fromtimestamp(file_info.modified_time, tz=timezone.utc)
            response.set_header("Last-Modified", format_http_date(modified))

        if self.etag:
            response.set_header(
                "ETag", f'W/"{int(file_info.modified_time)}-{file_info.size}"'
            )
