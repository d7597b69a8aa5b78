"""
=============================================================================
FILE SERVER ERRORS
=============================================================================

Exceptions raised by the file serving layer.

Most failure modes of a static file server are NOT exceptions at all:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Failure                    │ Outcome                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │ Path escapes serving root  │ Request declined (no response)         │
    │ Percent-decoding fails     │ Raw path used, warning logged          │
    │ Range header unparsable    │ Full body served                       │
    │ Range part unreadable      │ Empty part, warning logged             │
    │ Full file unreadable       │ 500 Internal Server Error              │
    │ Redirect cannot be issued  │ RedirectError raised  ◄── this module  │
    └─────────────────────────────────────────────────────────────────────┘

Only the redirect failure travels up to the caller, because only the
caller (the server loop) can decide what an errored request looks like
on the wire.
=============================================================================
"""


class FileServerError(Exception):
    """Base class for errors raised by the file server."""


class RedirectError(FileServerError):
    """
    Raised when the trailing-slash redirect for a directory cannot be issued.

    Carries the redirect target and the underlying error so the request
    layer can report both:

        try:
            response = handler.handle(request)
        except RedirectError as e:
            logger.error(f"Redirect to {e.path} failed: {e.cause}")
    """

    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"Failed to redirect request to {path!r}: {cause}")
        self.path = path
        self.cause = cause
