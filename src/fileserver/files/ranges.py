"""
=============================================================================
RANGE HEADER PARSING (RFC 7233)
=============================================================================

Parses the HTTP Range request header against a known file size.

=============================================================================
RANGE HEADER SYNTAX
=============================================================================

    Range: bytes=0-499,1000-,-200
           ─┬─── ──┬── ──┬── ──┬─
            │      │     │     │
          Unit   First  From   Last
                 500    1000   200
                 bytes  to end bytes

Each comma-separated spec takes one of three forms:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Spec       │ Meaning                      │ File of 1000 bytes      │
    ├─────────────────────────────────────────────────────────────────────┤
    │ N-M        │ Bytes N through M inclusive  │ 0-499  → [0, 499]       │
    │ N-         │ Byte N through end of file   │ 500-   → [500, 999]     │
    │ -N         │ Last N bytes                 │ -100   → [900, 999]     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
LENIENCY
=============================================================================

A Range header is a hint, never a requirement. If the header is
malformed, uses an unknown unit, or none of its specs fit the file, the
server simply ignores it and sends the whole file with 200 OK.

Individual specs that are malformed or out of bounds are dropped; the
remaining valid ones are kept in header order (no sorting, no merging).
=============================================================================
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple


# The only range unit HTTP defines
BYTES_UNIT = "bytes"

# One range spec: "N-M", "N-" or "-N" (digits only, surrounding space allowed)
RANGE_SPEC_PATTERN = re.compile(r"^\s*(\d*)\s*-\s*(\d*)\s*$")


@dataclass(frozen=True)
class ByteRange:
    """
    An inclusive span of bytes: [lower, upper].

    Invariant (enforced by the parser): 0 <= lower <= upper < file_size.
    """

    lower: int
    upper: int

    @property
    def length(self) -> int:
        """Number of bytes in the span (both ends included)."""
        return self.upper - self.lower + 1

    def content_range(self, file_size: int) -> str:
        """Format as a Content-Range value: 'bytes 0-499/1000'."""
        return f"{BYTES_UNIT} {self.lower}-{self.upper}/{file_size}"


@dataclass(frozen=True)
class RangeRequest:
    """A parsed Range header: its unit and the valid ranges, in header order."""

    unit: str
    ranges: Tuple[ByteRange, ...]

    @property
    def is_multipart(self) -> bool:
        """More than one range means a multipart/byteranges response."""
        return len(self.ranges) > 1


def parse_range_spec(spec: str, file_size: int) -> Optional[ByteRange]:
    """
    Parse a single range spec ("0-499", "500-", "-100").

    Returns None when the spec is malformed or does not fit the file.
    """
    match = RANGE_SPEC_PATTERN.match(spec)
    if not match:
        return None

    start_str, end_str = match.groups()

    try:
        if start_str and end_str:
            # N-M: explicit range, rejected (not clamped) when it runs past EOF
            lower, upper = int(start_str), int(end_str)
        elif start_str:
            # N-: from N to the last byte
            lower, upper = int(start_str), file_size - 1
        elif end_str:
            # -N: the last N bytes, never starting before byte 0
            lower, upper = max(file_size - int(end_str), 0), file_size - 1
        else:
            # "-" alone
            return None
    except ValueError:
        # More digits than int() will convert (sys.get_int_max_str_digits)
        return None

    if lower > upper or upper >= file_size:
        return None

    return ByteRange(lower, upper)


def parse_range_header(
    header_value: Optional[str],
    file_size: int,
) -> Optional[RangeRequest]:
    """
    Parse a Range header value against a file size.

    Args:
        header_value: Raw header value, e.g. "bytes=0-99,200-299".
        file_size: Size of the file the ranges refer to.

    Returns:
        A RangeRequest with at least one range, or None when the header
        should be ignored and the full body served.

    Examples:
        >>> parse_range_header("bytes=0-499", 1000).ranges
        (ByteRange(lower=0, upper=499),)
        >>> parse_range_header("bytes=-100", 1000).ranges
        (ByteRange(lower=900, upper=999),)
        >>> parse_range_header("bytes=abc", 1000) is None
        True
    """
    if not header_value or "=" not in header_value:
        return None

    unit, _, specs = header_value.partition("=")
    unit = unit.strip().lower()

    # Units are case-insensitive, but bytes is the only one we serve
    if unit != BYTES_UNIT:
        return None

    ranges = []
    for spec in specs.split(","):
        byte_range = parse_range_spec(spec, file_size)
        if byte_range is not None:
            ranges.append(byte_range)

    if not ranges:
        return None

    return RangeRequest(unit=unit, ranges=tuple(ranges))
