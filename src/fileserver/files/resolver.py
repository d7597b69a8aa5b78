"""
=============================================================================
REQUEST PATH RESOLUTION
=============================================================================

Maps a request path onto a candidate filesystem path.

=============================================================================
RESOLUTION STEPS
=============================================================================

    Route pattern:  /static/*path        Serving root: /srv/www
    Request path:   /static/css/my%20site.css

    1. Normalize the matched prefix   /static/*path  →  /static/
    2. Strip it from the request      css/my%20site.css
    3. Percent-decode the remainder   css/my site.css
    4. Append to the serving root     /srv/www/css/my site.css

    Directory requests (trailing slash):

    Request path:   /static/docs/
    Candidate:      /srv/www/docs/
                    → /srv/www/docs/index.html   (index serving enabled)
                    → None                       (index serving disabled)

The remainder is appended with plain string concatenation, never
os.path.join: a remainder such as "/etc/passwd" must stay under the root
("/srv/www//etc/passwd") instead of replacing it.
=============================================================================
"""

import logging
import re
from typing import Iterator, Optional, Tuple
from urllib.parse import unquote


logger = logging.getLogger(__name__)


# A "%" that is not followed by two hex digits
MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

ESCAPE = re.compile(r"%[0-9A-Fa-f]{2}")


def percent_decode(text: str) -> str:
    """
    Strictly percent-decode a URL path fragment.

    Raises:
        ValueError: On a malformed escape ("%zz", trailing "%") or when the
            decoded bytes are not valid UTF-8.
    """
    if MALFORMED_ESCAPE.search(text):
        raise ValueError(f"malformed percent-escape in {text!r}")
    # UnicodeDecodeError is a ValueError subclass
    return unquote(text, encoding="utf-8", errors="strict")


def normalize_prefix(matched_path: str) -> str:
    """
    Turn a matched route pattern into a path prefix ending in "/".

        /static/*path  →  /static/
        /files*        →  /files/
        /docs          →  /docs/
    """
    prefix = matched_path.split("*", 1)[0]
    if not prefix.endswith("/"):
        prefix += "/"
    return prefix


def _decoded_bytes(raw: str) -> Iterator[Tuple[int, int]]:
    """Yield (byte, raw index after it) for each byte raw decodes to."""
    index = 0
    while index < len(raw):
        if ESCAPE.match(raw, index):
            yield int(raw[index + 1:index + 3], 16), index + 3
            index += 3
        else:
            index += 1
            for byte in raw[index - 1].encode("utf-8", "surrogatepass"):
                yield byte, index


def strip_prefix(raw_path: str, prefix: str) -> Optional[str]:
    """
    Remove a decoded prefix from a still-encoded path.

    The router matches on the decoded path, so the prefix may arrive
    percent-encoded:

        strip_prefix("/static/a%20b.txt", "/static/")   →  "a%20b.txt"
        strip_prefix("/st%61tic/a%20b.txt", "/static/") →  "a%20b.txt"
        strip_prefix("/other/a.txt", "/static/")        →  None

    The remainder is returned still encoded.
    """
    if raw_path.startswith(prefix):
        return raw_path[len(prefix):]

    decoded = _decoded_bytes(raw_path)
    end = 0
    for expected in prefix.encode("utf-8"):
        byte, end = next(decoded, (None, end))
        if byte != expected:
            return None
    return raw_path[end:]


class PathResolver:
    """
    Resolves request paths against a serving root.

    Stateless apart from its configuration, so one instance can be shared
    by any number of concurrent requests.
    """

    def __init__(
        self,
        serving_root: str,
        serve_index_for_directory: bool = True,
        index_file: str = "index.html",
    ):
        self.serving_root = serving_root
        self.serve_index_for_directory = serve_index_for_directory
        self.index_file = index_file

    def resolve(self, request_path: str, matched_path: str = "/") -> Optional[str]:
        """
        Resolve a request path to a candidate filesystem path.

        Args:
            request_path: The URL path as received (still percent-encoded).
            matched_path: The route pattern that matched this request.

        Returns:
            The candidate path, or None when the request path is not under
            the matched prefix, or names a directory while index serving is
            disabled.
        """
        prefix = normalize_prefix(matched_path)
        remainder = strip_prefix(request_path, prefix)

        if remainder is not None:
            file_path = f"{self.serving_root}/{self._decode(remainder)}"
        elif strip_prefix(request_path + "/", prefix) == "":
            # The mount point itself, without its slash: "/static"
            file_path = self.serving_root
        else:
            return None

        if file_path.endswith("/"):
            if not self.serve_index_for_directory:
                return None
            file_path += self.index_file

        return file_path

    def _decode(self, remainder: str) -> str:
        try:
            return percent_decode(remainder)
        except ValueError:
            logger.warning(f"Unable to decode URL path {remainder!r}, using it as-is")
            return remainder
