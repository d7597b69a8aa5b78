"""
=============================================================================
PATH SAFETY VALIDATION
=============================================================================

Keeps every served file inside the serving root.

=============================================================================
PATH TRAVERSAL
=============================================================================

    ATTACK ATTEMPT:
    ┌─────────────────────────────────────────────────────────────────────┐
    │  GET /static/..%2F..%2Fetc%2Fpasswd HTTP/1.1                       │
    │                                                                      │
    │  After percent-decoding the candidate becomes:                      │
    │  /srv/www/../../etc/passwd                                          │
    │  → /etc/passwd                                                      │
    │                                                                      │
    │  Protection:                                                        │
    │  1. Resolve both root and candidate (follow .. and symlinks)       │
    │  2. Require the candidate to lie inside the root, component-wise   │
    │  3. Otherwise: decline silently (no 403, no listing, no hint)      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    WHY COMPONENT-WISE?

        A plain string prefix test is fooled by sibling directories:

            "/srv/www-evil/secret".startswith("/srv/www")   → True  (!)
            Path("/srv/www-evil/secret").relative_to("/srv/www")
                                                            → ValueError

=============================================================================
"""

import logging
from pathlib import Path
from typing import Union


logger = logging.getLogger(__name__)


class PathSafetyValidator:
    """
    Decides whether a candidate filesystem path may be served.

    The root is resolved once, at construction. Candidates are resolved per
    call, so the check always reflects the filesystem as it is now.

    Usage:
        validator = PathSafetyValidator("/srv/www")
        validator.is_safe("/srv/www/css/site.css")         # True
        validator.is_safe("/srv/www/../../etc/passwd")     # False
        validator.is_safe("/srv/www-evil/secret")          # False
    """

    def __init__(self, serving_root: Union[str, Path]):
        self.serving_root = Path(serving_root).resolve()

    def is_safe(self, candidate: Union[str, Path]) -> bool:
        """
        Check that a candidate path lies inside the serving root.

        The root itself counts as inside. Paths that cannot be resolved
        (embedded NUL bytes, symlink loops) are never safe.
        """
        try:
            resolved = Path(candidate).resolve()
        except (OSError, ValueError, RuntimeError):
            return False

        try:
            resolved.relative_to(self.serving_root)
        except ValueError:
            logger.warning(f"Path traversal attempt: {candidate}")
            return False

        return True
