"""
=============================================================================
FILESYSTEM PROBE AND EXTENSION FALLBACK
=============================================================================

Answers two questions per request:

    1. Does this path exist, and is it a directory?      → stat_path()
    2. If not, does "<path>.<ext>" exist for one of the
       configured extensions?                            → ExtensionFallbackProbe

=============================================================================
EXTENSION FALLBACK
=============================================================================

Lets clean URLs map onto files with extensions:

    possible_extensions = ("html", "htm")

    GET /about
        /srv/www/about          missing
        /srv/www/about.html     missing
        /srv/www/about.htm      exists   → served

Extensions are tried in configured order and the FIRST existing regular
file wins; a directory named "about.html" is skipped.
=============================================================================
"""

import os
import stat
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .safety import PathSafetyValidator


@dataclass(frozen=True)
class FileInfo:
    """Metadata read fresh for each request (never cached)."""

    size: int
    is_directory: bool
    modified_time: float = 0.0


def stat_path(path: str) -> Optional[FileInfo]:
    """
    Probe a path on disk.

    Symlinks are followed. Any failure (missing file, permission problem,
    embedded NUL byte) reads as "does not exist".
    """
    try:
        st = os.stat(path)
    except (OSError, ValueError):
        return None

    return FileInfo(
        size=st.st_size,
        is_directory=stat.S_ISDIR(st.st_mode),
        modified_time=st.st_mtime,
    )


class ExtensionFallbackProbe:
    """
    Tries "<candidate>.<ext>" for each configured extension, in order.

    When a validator is supplied, every match must also pass the
    serving-root check before it is returned.
    """

    def __init__(
        self,
        extensions: Iterable[str],
        validator: Optional[PathSafetyValidator] = None,
    ):
        self.extensions = tuple(extensions)
        self.validator = validator

    def find(self, candidate: str) -> Optional[Tuple[str, FileInfo]]:
        """
        Find the first existing non-directory file for the candidate.

        Returns:
            (path, info) of the match, or None when nothing matches.
        """
        for extension in self.extensions:
            path = f"{candidate}.{extension}"
            info = stat_path(path)
            if info is None or info.is_directory:
                continue
            if self.validator is not None and not self.validator.is_safe(path):
                continue
            return path, info
        return None
