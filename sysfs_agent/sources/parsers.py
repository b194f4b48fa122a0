"""
Sysfs Agent - Parsing Rules

Pure functions turning the raw text of a sysfs node into typed values.
Each raises SourceParseError on malformed input; a torn or partial read
lands here too and is skipped rather than reported.
"""

import math
import re
from typing import Optional, Tuple

from ..errors import SourceParseError

_INT_RE = re.compile(r"[+-]?[0-9]+")
_PAIR_SEP = re.compile(r"[,\s]+")


def parse_histogram(raw: str, path: Optional[str] = None) -> str:
    """Normalize whitespace-separated bins to a comma-separated string.

    "1 2 3 " -> "1,2,3"
    """
    bins = raw.split()
    if not bins:
        raise SourceParseError("Empty histogram", path=path, raw=raw)
    return ",".join(bins)


def parse_failure_flag(raw: str, path: Optional[str] = None) -> bool:
    """Return True if the flag reports a failure.

    Only the exact content "0" is healthy; a trailing newline counts as a failure.
    """
    return raw != "0"


def parse_counter(raw: str, path: Optional[str] = None) -> int:
    """Parse a single base-10 integer."""
    text = raw.strip()
    if not _INT_RE.fullmatch(text):
        raise SourceParseError(f"Not an integer: {text!r}", path=path, raw=raw)
    return int(text, 10)


def parse_channel_pair(raw: str, path: Optional[str] = None) -> Tuple[float, float]:
    """Parse two floats separated by a comma and/or whitespace."""
    text = raw.strip()
    parts = [p for p in _PAIR_SEP.split(text) if p]
    if len(parts) != 2:
        raise SourceParseError(f"Expected 2 values, got {len(parts)}", path=path, raw=raw)

    try:
        left, right = float(parts[0]), float(parts[1])
    except ValueError as e:
        raise SourceParseError(str(e), path=path, raw=raw) from e

    if not (math.isfinite(left) and math.isfinite(right)):
        raise SourceParseError("Non-finite value", path=path, raw=raw)
    return left, right


def scale_value(value: float, factor: int) -> int:
    """Apply a unit conversion factor, e.g. ohms -> milliohms."""
    return int(round(value * factor))
