"""
=============================================================================
FILE SERVING CORE
=============================================================================

The pieces the static file handler is assembled from, leaf-first:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ resolver.py   request path + matched prefix → candidate path        │
    │ safety.py     candidate must stay inside the serving root           │
    │ probe.py      stat the candidate; try fallback extensions           │
    │ directory.py  directory without slash → redirect (or decline)       │
    │ ranges.py     Range header → inclusive byte ranges                  │
    │ partial.py    byte ranges → 206 single or multipart body            │
    │ headers.py    per-file header customization hook                    │
    └─────────────────────────────────────────────────────────────────────┘

Control flow (see handlers/static.py):

    resolve → safety check → stat
        ├── directory → DirectoryHandler
        ├── missing   → ExtensionFallbackProbe → file | unhandled
        └── file      → Accept-Ranges → hook → full body | 206
=============================================================================
"""

from .resolver import PathResolver, percent_decode, normalize_prefix
from .safety import PathSafetyValidator
from .probe import FileInfo, stat_path, ExtensionFallbackProbe
from .ranges import ByteRange, RangeRequest, parse_range_header, parse_range_spec
from .partial import PartialContentSerializer, read_range, generate_boundary
from .directory import DirectoryHandler
from .headers import ResponseHeadersSetter, CacheHeadersSetter

__all__ = [
    "PathResolver",
    "percent_decode",
    "normalize_prefix",
    "PathSafetyValidator",
    "FileInfo",
    "stat_path",
    "ExtensionFallbackProbe",
    "ByteRange",
    "RangeRequest",
    "parse_range_header",
    "parse_range_spec",
    "PartialContentSerializer",
    "read_range",
    "generate_boundary",
    "DirectoryHandler",
    "ResponseHeadersSetter",
    "CacheHeadersSetter",
]
