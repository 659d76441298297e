"""
Numeric range bucketing.

Raw values arrive as free-form strings -- "$1.5B", "250K", "10,000,000",
"75", "-" -- or plain numbers.  ``parse_magnitude`` is the one place
they are parsed: currency symbols and separators are stripped, a K/M/B
suffix scales the number, and the result is expressed in the unit the
ranges are written in (millions unless told otherwise).

``bucket_ranges`` then drops every record into exactly one range.  A
value that is missing or cannot be parsed is counted in the LOWEST
range: unknown is treated as smallest.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from numbers import Real
from typing import Any, Sequence

from src.analytics.buckets import BucketEntry
from src.core.logging import get_logger

logger = get_logger(__name__)

MILLIONS = 1_000_000.0

_MISSING = {"", "-"}
_STRIP_RE = re.compile(r"[\s$€£¥,%]")
# Leading number plus optional suffix; anything after it ("-$50M", "+",
# "(est.)") is ignored.
_NUMBER_RE = re.compile(
    r"^([-+]?(?:\d+\.?\d*|\.\d+))(?:(k|thousand|mm|mn|m|million|bn|b|billion)(?![a-z]))?",
    re.IGNORECASE,
)
_SUFFIX_SCALE = {
    "k": 1e3, "thousand": 1e3,
    "m": 1e6, "mm": 1e6, "mn": 1e6, "million": 1e6,
    "b": 1e9, "bn": 1e9, "billion": 1e9,
}


@dataclass(frozen=True)
class Range:
    """Half-open interval ``[lower, upper)``; ``None`` means unbounded."""
    label: str
    lower: float | None = None
    upper: float | None = None

    def contains(self, value: float) -> bool:
        if self.lower is not None and value < self.lower:
            return False
        if self.upper is not None and value >= self.upper:
            return False
        return True


def parse_magnitude(raw: Any, unit: float = MILLIONS, bare_unit: float | None = None) -> float | None:
    """Parse a numeric-like value into multiples of *unit*.

    A suffixed value is scaled to absolute terms and divided by *unit*
    ("$1.5B" -> 1500.0 in millions).  A bare number is taken to be in
    *bare_unit* (defaults to *unit*, so "75" -> 75.0 in millions).
    Only the leading figure is read: "$10M-$50M" -> 10.0, "$5M+" -> 5.0.
    Returns None for missing or unparseable input.
    """
    if raw is None or isinstance(raw, bool):
        return None
    bare = unit if bare_unit is None else bare_unit

    if isinstance(raw, Real):
        value = float(raw)
        return value * bare / unit if math.isfinite(value) else None
    if not isinstance(raw, str):
        return None

    text = raw.strip()
    if text in _MISSING:
        return None
    match = _NUMBER_RE.match(_STRIP_RE.sub("", text))
    if match is None:
        return None

    number = float(match.group(1))
    suffix = match.group(2)
    if suffix:
        return number * _SUFFIX_SCALE[suffix.lower()] / unit
    return number * bare / unit


def coerce_ranges(ranges: Sequence[Any]) -> tuple[Range, ...]:
    """Accept Range objects, (label, lower, upper) tuples or dicts."""
    if not isinstance(ranges, (list, tuple)) or not ranges:
        raise ValueError("ranges must be a non-empty list")
    result: list[Range] = []
    for r in ranges:
        if isinstance(r, Range):
            result.append(r)
        elif isinstance(r, dict):
            result.append(Range(label=r["label"], lower=r.get("lower"), upper=r.get("upper")))
        else:
            label, lower, upper = r
            result.append(Range(label=label, lower=lower, upper=upper))
    validate_ranges(result)
    return tuple(result)


def validate_ranges(ranges: Sequence[Range]) -> None:
    """Ranges must be ascending, contiguous and open-ended at the top."""
    for current, following in zip(ranges, ranges[1:]):
        if current.upper is None or current.upper != following.lower:
            raise ValueError(
                f"Range '{current.label}' must end where '{following.label}' begins"
            )
        if current.lower is not None and current.lower >= current.upper:
            raise ValueError(f"Range '{current.label}' is empty")
    if ranges[-1].upper is not None:
        raise ValueError(f"Last range '{ranges[-1].label}' must have no upper bound")


def assign(value: float | None, ranges: Sequence[Range]) -> int:
    """Index of the range that *value* falls in; the lowest for unknown values."""
    if value is None:
        return 0
    for i, r in enumerate(ranges):
        if r.contains(value):
            return i
    # Only reachable below the first range's lower bound
    return 0


def bucket_ranges(
    raw_values: Sequence[Any],
    ranges: Sequence[Any],
    unit: float = MILLIONS,
    bare_unit: float | None = None,
) -> list[BucketEntry]:
    """Count each raw value into one of *ranges*, in range order."""
    if not isinstance(raw_values, (list, tuple)):
        raise TypeError(f"raw_values must be a list, got {type(raw_values).__name__}")
    parsed_ranges = coerce_ranges(ranges)

    counts = [0] * len(parsed_ranges)
    unparsed = 0
    for raw in raw_values:
        value = parse_magnitude(raw, unit=unit, bare_unit=bare_unit)
        if value is None:
            unparsed += 1
        counts[assign(value, parsed_ranges)] += 1

    if unparsed:
        logger.debug("%d of %d values unparseable -- counted in '%s'",
                     unparsed, len(raw_values), parsed_ranges[0].label)
    return [BucketEntry(name=r.label, value=c) for r, c in zip(parsed_ranges, counts)]
