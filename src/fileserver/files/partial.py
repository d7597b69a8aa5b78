"""
=============================================================================
PARTIAL CONTENT (206) SERIALIZATION
=============================================================================

Turns a parsed RangeRequest into a 206 response body.

=============================================================================
SINGLE RANGE
=============================================================================

    HTTP/1.1 206 Partial Content
    Content-Type: video/mp4
    Content-Range: bytes 0-99/1000

    <100 bytes>

=============================================================================
MULTIPLE RANGES (multipart/byteranges)
=============================================================================

    HTTP/1.1 206 Partial Content
    Content-Type: multipart/byteranges; boundary=FileServerBoundary3f2a...

    --FileServerBoundary3f2a...\r\n
    Content-Range: bytes 0-99/1000\r\n
    Content-Type: video/mp4\r\n            (omitted when type is unknown)
    \r\n
    <100 bytes>\r\n
    --FileServerBoundary3f2a...\r\n
    Content-Range: bytes 200-299/1000\r\n
    Content-Type: video/mp4\r\n
    \r\n
    <100 bytes>\r\n
    --FileServerBoundary3f2a...--

The boundary carries a fresh UUID per response so it cannot be guessed
from, or collide with, the file's content.

The whole multipart body is built in memory; every requested range is
buffered before the response is sent.
=============================================================================
"""

import logging
import uuid
from typing import Callable, Optional

from ..http.response import HTTPResponse
from ..http.status_codes import HTTPStatus
from .ranges import ByteRange, RangeRequest


logger = logging.getLogger(__name__)


CRLF = b"\r\n"
BOUNDARY_PREFIX = "FileServerBoundary"


def generate_boundary() -> str:
    """A multipart boundary that is unique per response."""
    return f"{BOUNDARY_PREFIX}{uuid.uuid4().hex}"


def read_range(file_path: str, byte_range: ByteRange) -> bytes:
    """
    Read the bytes [lower, upper] of a file.

    Returns b"" when the file cannot be read. The caller serves an empty
    part instead of failing the whole response.
    """
    try:
        with open(file_path, "rb") as f:
            f.seek(byte_range.lower)
            return f.read(byte_range.length)
    except OSError as e:
        logger.warning(
            f"Failed to read bytes {byte_range.lower}-{byte_range.upper} "
            f"of {file_path}: {e}"
        )
        return b""


class PartialContentSerializer:
    """
    Writes 206 Partial Content responses.

    Args:
        boundary_factory: Produces the multipart boundary. Tests pass a
            constant; the default generates a UUID-based token.
        reader: Reads one range of a file; defaults to read_range().
    """

    def __init__(
        self,
        boundary_factory: Callable[[], str] = generate_boundary,
        reader: Callable[[str, ByteRange], bytes] = read_range,
    ):
        self.boundary_factory = boundary_factory
        self.reader = reader

    def serialize(
        self,
        response: HTTPResponse,
        file_path: str,
        file_size: int,
        range_request: RangeRequest,
        content_type: Optional[str] = None,
    ) -> HTTPResponse:
        """Fill in status, headers and body for the requested ranges."""
        if range_request.is_multipart:
            self._serialize_multipart(response, file_path, file_size, range_request, content_type)
        else:
            self._serialize_single(response, file_path, file_size, range_request.ranges[0], content_type)

        response.set_status(HTTPStatus.PARTIAL_CONTENT)
        return response

    def _serialize_single(
        self,
        response: HTTPResponse,
        file_path: str,
        file_size: int,
        byte_range: ByteRange,
        content_type: Optional[str],
    ) -> None:
        if content_type:
            response.set_header("Content-Type", content_type)
        response.set_header("Content-Range", byte_range.content_range(file_size))
        response.set_body(self.reader(file_path, byte_range))

    def _serialize_multipart(
        self,
        response: HTTPResponse,
        file_path: str,
        file_size: int,
        range_request: RangeRequest,
        content_type: Optional[str],
    ) -> None:
        boundary = self.boundary_factory()
        response.set_header("Content-Type", f"multipart/byteranges; boundary={boundary}")

        parts = []
        for byte_range in range_request.ranges:
            part_header = f"--{boundary}\r\n"
            part_header += f"Content-Range: {byte_range.content_range(file_size)}\r\n"
            if content_type:
                part_header += f"Content-Type: {content_type}\r\n"
            part_header += "\r\n"

            parts.append(part_header.encode("latin-1"))
            parts.append(self.reader(file_path, byte_range))
            parts.append(CRLF)

        parts.append(f"--{boundary}--".encode("latin-1"))
        response.set_body(b"".join(parts))
