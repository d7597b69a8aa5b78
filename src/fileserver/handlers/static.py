"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Serves files from a serving root, including byte-range (206) responses.

=============================================================================
DISPATCH
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         RESOLVING                                   │
    │   PathResolver: raw path + matched prefix → candidate               │
    │   PathSafetyValidator: candidate inside serving root?               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   not under prefix / unsafe   → NOT APPLICABLE  (None)              │
    │   exists, directory           → DIRECTORY FOUND                     │
    │        redirect on  → 302 Location: <path>/                        │
    │        redirect off → None                                          │
    │   does not exist              → MISSING                             │
    │        "<path>.<ext>" for each extension, first file wins           │
    │        none         → None                                          │
    │   exists, file                → FILE FOUND                          │
    │                                                                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │                         FILE FOUND                                  │
    │   1. Accept-Ranges: bytes | none                                    │
    │   2. headers_setter.set_custom_response_headers(...)                │
    │   3. GET + ranges on + valid Range  → 206 (single or multipart)     │
    │      HEAD                           → 200, Content-Length, no body  │
    │      otherwise                      → 200, whole file               │
    └─────────────────────────────────────────────────────────────────────┘

None means "not handled here": the caller decides what to answer, which
is usually 404 (see respond()). A path that escapes the serving root gets
exactly the same treatment as a missing file, so a client cannot tell
the two apart.

=============================================================================
USAGE
=============================================================================

    handler = serve_static("./public", possible_extensions=("html",))

    server = FileHTTPServer()
    server.mount("/static", handler)

    # or by hand, on any Router:
    router.get("/static/*path")(handler.respond)

=============================================================================
"""

import logging
from typing import Callable, Optional

from ..config import FileServerConfig
from ..files.directory import DirectoryHandler
from ..files.headers import ResponseHeadersSetter
from ..files.partial import PartialContentSerializer
from ..files.probe import ExtensionFallbackProbe, FileInfo, stat_path
from ..files.ranges import parse_range_header
from ..files.resolver import PathResolver
from ..files.safety import PathSafetyValidator
from ..http.mime_types import get_content_type
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, internal_error, not_found
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


ContentTypeLookup = Callable[[str], Optional[str]]


class StaticFileHandler:
    """
    Handler for serving static files.

    Holds no per-request state, so one instance serves any number of
    concurrent requests.

    Args:
        config: What to serve and how.
        headers_setter: Header customization hook, called once per served
            file before the body is produced.
        content_type_lookup: Maps a file path to a Content-Type. None, or a
            lookup returning None, omits the header.
        serializer: Builds 206 responses.
    """

    SERVED_METHODS = ("GET", "HEAD")

    def __init__(
        self,
        config: FileServerConfig,
        headers_setter: Optional[ResponseHeadersSetter] = None,
        content_type_lookup: Optional[ContentTypeLookup] = get_content_type,
        serializer: Optional[PartialContentSerializer] = None,
    ):
        self.config = config
        self.resolver = PathResolver(
            config.serving_root,
            serve_index_for_directory=config.serve_index_for_directory,
            index_file=config.index_file,
        )
        self.validator = PathSafetyValidator(config.serving_root)
        self.fallback = ExtensionFallbackProbe(config.possible_extensions, self.validator)
        self.directories = DirectoryHandler(redirect=config.redirect_on_directory)
        self.headers_setter = headers_setter or ResponseHeadersSetter()
        self.content_type_lookup = content_type_lookup
        self.serializer = serializer or PartialContentSerializer()

    def handle(self, request: HTTPRequest) -> Optional[HTTPResponse]:
        """
        Serve the request if it maps onto something under the serving root.

        Returns:
            The response, or None when this handler does not serve the
            request (wrong method, outside the prefix, unsafe, missing,
            or a directory that is not redirected).

        Raises:
            RedirectError: If a directory redirect cannot be issued.
        """
        if request.method not in self.SERVED_METHODS:
            logger.debug(f"Not serving {request.method} {request.raw_path}: method")
            return None

        file_path = self.resolver.resolve(request.raw_path, request.matched_path)
        if file_path is None:
            logger.debug(f"Not serving {request.raw_path}: not under {request.matched_path}")
            return None

        if not self.validator.is_safe(file_path):
            return None

        file_info = stat_path(file_path)

        if file_info is None:
            match = self.fallback.find(file_path)
            if match is None:
                logger.debug(f"Not serving {request.raw_path}: {file_path} not found")
                return None
            file_path, file_info = match

        elif file_info.is_directory:
            logger.debug(f"{file_path} is a directory")
            return self.directories.handle(request.raw_path)

        return self.serve_file(request, file_path, file_info)

    def respond(self, request: HTTPRequest) -> HTTPResponse:
        """Like handle(), but answers 404 instead of declining."""
        response = self.handle(request)
        if response is None:
            return not_found(f"File not found: {request.path}")
        return response

    __call__ = respond

    def serve_file(
        self,
        request: HTTPRequest,
        file_path: str,
        file_info: FileInfo,
    ) -> HTTPResponse:
        """Serve an existing regular file: full body, HEAD or 206."""
        response = HTTPResponse()
        response.set_header("Accept-Ranges", "bytes" if self.config.accept_ranges else "none")

        self.headers_setter.set_custom_response_headers(response, file_path, file_info)

        # A type chosen by the hook wins over the lookup
        content_type = response.headers.get("Content-Type") or self._content_type(file_path)

        # Only GET carries range semantics
        if self.config.accept_ranges and request.method == "GET":
            range_request = parse_range_header(request.range, file_info.size)
            if range_request is not None:
                logger.debug(
                    f"Serving {len(range_request.ranges)} range(s) of {file_path}"
                )
                return self.serializer.serialize(
                    response, file_path, file_info.size, range_request, content_type
                )

        if content_type:
            response.set_header("Content-Type", content_type)

        if request.method == "HEAD":
            response.set_header("Content-Length", str(file_info.size))
            return response.set_status(HTTPStatus.OK)

        try:
            with open(file_path, "rb") as f:
                body = f.read()
        except OSError as e:
            logger.error(f"Failed to serve file {file_path}: {e}")
            return internal_error("Failed to read file")

        return response.set_status(HTTPStatus.OK).set_body(body)

    def _content_type(self, file_path: str) -> Optional[str]:
        if self.content_type_lookup is None:
            return None
        return self.content_type_lookup(file_path)


def serve_static(
    serving_root: str,
    headers_setter: Optional[ResponseHeadersSetter] = None,
    content_type_lookup: Optional[ContentTypeLookup] = get_content_type,
    **options,
) -> StaticFileHandler:
    """
    Create a static file handler for a directory.

    Keyword options are FileServerConfig fields. The configuration is
    validated, so a missing serving root fails here rather than on the
    first request.

    Example:
        static = serve_static(
            "/var/www",
            possible_extensions=("html", "htm"),
            headers_setter=CacheHeadersSetter(max_age=86400),
        )
    """
    config = FileServerConfig(serving_root=serving_root, **options)
    config.validate()
    return StaticFileHandler(
        config,
        headers_setter=headers_setter,
        content_type_lookup=content_type_lookup,
    )
