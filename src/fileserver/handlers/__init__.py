"""
=============================================================================
HANDLERS
=============================================================================

A handler takes a parsed request and returns a response:

    ┌─────────┐           ┌──────────────────┐           ┌─────────────┐
    │ GET     │           │                  │           │ 206 Partial │
    │ /static/│ ────────▶ │ StaticFileHandler│ ────────▶ │ Content     │
    │ clip.mp4│           │                  │           │ <bytes>     │
    └─────────┘           └──────────────────┘           └─────────────┘

StaticFileHandler.handle() may also return None ("not mine"); respond()
turns that into a 404 so it can be registered on a Router directly.

    from fileserver.handlers import serve_static

    static = serve_static("/var/www", possible_extensions=("html",))
    router.get("/static/*path")(static.respond)
=============================================================================
"""

from .static import StaticFileHandler, serve_static

__all__ = [
    "StaticFileHandler",
    "serve_static",
]
