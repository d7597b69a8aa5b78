"""
=============================================================================
CONTENT-TYPE LOOKUP
=============================================================================

Maps file names to the Content-Type a file server should announce.

The file handler treats this as a pluggable collaborator: any callable
taking a path and returning a type string (or None for "unknown") works.

    handler = StaticFileHandler(config)                          # default
    handler = StaticFileHandler(config, content_type_lookup=None)  # omit
    handler = StaticFileHandler(config, content_type_lookup=my_lookup)

=============================================================================
WHERE THE TYPE SHOWS UP
=============================================================================

    Full body / single range:
        Content-Type: text/css; charset=utf-8

    Multiple ranges (the response itself is multipart, each part
    carries the file's type):
        Content-Type: multipart/byteranges; boundary=...

        --boundary
        Content-Range: bytes 0-99/1000
        Content-Type: text/css; charset=utf-8

        <100 bytes>

Text types get a charset parameter; binary types do not. Unknown
extensions fall back to application/octet-stream.
=============================================================================
"""

from pathlib import Path
from typing import Optional, Union


MIME_TYPES = {
    # Text
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".xml": "application/xml",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",
    ".map": "application/json",     # Source maps

    # Images
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".webp": "image/webp",
    ".avif": "image/avif",

    # Fonts
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",

    # Audio / video: the usual clients of range requests
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".m4a": "audio/mp4",
    ".flac": "audio/flac",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".mov": "video/quicktime",
    ".mkv": "video/x-matroska",

    # Documents and archives (resumable downloads)
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".tar": "application/x-tar",
    ".gz": "application/gzip",
    ".7z": "application/x-7z-compressed",
    ".wasm": "application/wasm",
}

DEFAULT_MIME_TYPE = "application/octet-stream"

# application/* and image/* types that are really text
TEXT_LIKE_TYPES = {
    "application/json",
    "application/xml",
    "application/javascript",
    "image/svg+xml",
}


def get_mime_type(path: Union[str, Path], default: Optional[str] = None) -> str:
    """
    MIME type for a file name, by extension (case-insensitive).

        >>> get_mime_type("/srv/www/movie.MP4")
        'video/mp4'
        >>> get_mime_type("notes.xyz")
        'application/octet-stream'
    """
    extension = Path(path).suffix.lower()
    return MIME_TYPES.get(extension, default or DEFAULT_MIME_TYPE)


def is_text_type(mime_type: str) -> bool:
    """True for text/* and the text-like types in TEXT_LIKE_TYPES."""
    return mime_type.startswith("text/") or mime_type in TEXT_LIKE_TYPES


def get_content_type(path: Union[str, Path], charset: str = "utf-8") -> str:
    """
    Full Content-Type header value for a file.

        >>> get_content_type("index.html")
        'text/html; charset=utf-8'
        >>> get_content_type("clip.webm")
        'video/webm'
    """
    mime_type = get_mime_type(path)
    if is_text_type(mime_type):
        return f"{mime_type}; charset={charset}"
    return mime_type
