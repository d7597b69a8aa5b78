"""
Directory requests without a trailing slash.

    GET /static/docs      (docs is a directory)
        redirect on   → 302 Found, Location: /static/docs/
        redirect off  → declined, nothing is served

The redirected request ends in "/", so the resolver turns it into
/static/docs/index.html on the next round trip.
"""

import logging
from typing import Optional

from ..errors import RedirectError
from ..http.response import HTTPResponse, ResponseBuilder


logger = logging.getLogger(__name__)


class DirectoryHandler:
    """Decides what to answer when the resolved path is a directory."""

    def __init__(self, redirect: bool = True):
        self.redirect = redirect

    def handle(self, request_path: str) -> Optional[HTTPResponse]:
        """
        Answer a request whose path resolved to a directory.

        Args:
            request_path: The request path as received (percent-encoded).

        Returns:
            A 302 redirect to request_path + "/", or None when redirects
            are disabled.

        Raises:
            RedirectError: If the redirect target cannot be sent as a
                Location header.
        """
        if not self.redirect:
            logger.debug(f"Directory {request_path} not served: redirect disabled")
            return None

        location = request_path + "/"
        try:
            return ResponseBuilder().redirect(location).build()
        except ValueError as e:
            raise RedirectError(location, e) from e
