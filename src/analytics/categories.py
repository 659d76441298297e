"""
Category bucketing for chart legends.

Industry / country / sector breakdowns can run to thousands of distinct
labels.  ``bucket_categories`` folds them into at most ``top_n + 1``
entries: the largest ``top_n`` labels in descending order, then a single
trailing "Others" slot holding the long tail.

Labels that say nothing about the category ("Industry agnostic",
"Various", "All", two-letter fragments ...) are re-mapped into a shared
"General/Various" bucket so their counts still add up.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from numbers import Real
from typing import Any, Iterable

from src.analytics.buckets import BucketEntry
from src.core.logging import get_logger

logger = get_logger(__name__)

GENERAL_BUCKET = "General/Various"
OTHERS_BUCKET = "Others"
UNKNOWN_LABEL = "unknown"
DEFAULT_TOP_N = 15
STOPLIST = ("agnostic", "general", "various", "multiple", "all")

_DEFAULT_SEPARATORS = ",;|"


def is_non_informative(label: str) -> bool:
    """True for catch-all labels that should land in the General/Various bucket.

    Stoplist terms match anywhere in the label, case-insensitively, so
    "Generalist" and "Smallcap" are caught too.
    """
    lowered = label.strip().lower()
    return len(lowered) <= 2 or any(term in lowered for term in STOPLIST)


def normalize_label(label: str) -> str:
    """Trim and upper-case the first letter; the rest is left as-is."""
    stripped = label.strip()
    return stripped[:1].upper() + stripped[1:]


def _as_pairs(entries: Any) -> Iterable[Any]:
    if isinstance(entries, Mapping):
        return entries.items()
    if isinstance(entries, (list, tuple)):
        return entries
    raise TypeError(f"entries must be a list of (label, count) pairs, got {type(entries).__name__}")


def _read_pair(pair: Any) -> tuple[str, float] | None:
    if not isinstance(pair, (list, tuple)) or len(pair) != 2:
        return None
    label, count = pair
    if not isinstance(label, str):
        return None
    if isinstance(count, bool) or not isinstance(count, Real):
        return None
    return label, count


def bucket_categories(
    entries: Any,
    top_n: int = DEFAULT_TOP_N,
    apply_stoplist: bool = True,
) -> list[BucketEntry]:
    """Aggregate, sort and cap a (label, count) dataset.

    Parameters
    ----------
    entries : list of (label, count) pairs, or a mapping label -> count
        Raw category counts.  Pairs without a string label or with a
        non-numeric count are skipped; a blank label still counts towards
        ``General/Various``.
    top_n : int
        Number of labels kept verbatim.
    apply_stoplist : bool
        Re-map non-informative labels into ``General/Various``.

    Returns
    -------
    list[BucketEntry]
        Descending by count (ties in first-seen order), followed by an
        ``Others`` entry when the remainder is non-zero.
    """
    if top_n < 1:
        raise ValueError(f"top_n must be >= 1, got {top_n}")

    totals: dict[str, float] = {}
    skipped = 0
    for raw in _as_pairs(entries):
        pair = _read_pair(raw)
        if pair is None:
            skipped += 1
            continue
        label, count = pair
        if not label.strip() or (apply_stoplist and is_non_informative(label)):
            key = GENERAL_BUCKET
        else:
            key = normalize_label(label)
        totals[key] = totals.get(key, 0) + count

    if skipped:
        logger.debug("Skipped %d malformed category entries", skipped)

    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(totals.items(), key=lambda item: -item[1])
    result = [BucketEntry(name=name, value=value) for name, value in ranked[:top_n]]
    others = sum(value for _, value in ranked[top_n:])
    if others:
        result.append(BucketEntry(name=OTHERS_BUCKET, value=others))
    return result


def tally_labels(
    records: Any,
    separators: str = _DEFAULT_SEPARATORS,
    apply_stoplist: bool = True,
) -> list[tuple[str, int]]:
    """Count labels across records whose label field may hold several values.

    Each record is a delimited string ("Fintech, AI; Health") or a list of
    strings.  A label counts once per record.  A record with no
    informative label counts once towards ``General/Various``.
    """
    if not isinstance(records, (list, tuple)):
        raise TypeError(f"records must be a list, got {type(records).__name__}")

    splitter = re.compile("[" + re.escape(separators) + "]+")
    counts: dict[str, int] = {}
    for record in records:
        if isinstance(record, str):
            parts = splitter.split(record)
        elif isinstance(record, (list, tuple)):
            parts = [p for p in record if isinstance(p, str)]
        else:
            parts = []

        labels: list[str] = []
        for part in parts:
            label = part.strip()
            if not label or label.lower() == UNKNOWN_LABEL:
                continue
            if apply_stoplist and is_non_informative(label):
                continue
            label = normalize_label(label)
            if label not in labels:
                labels.append(label)

        for label in labels or [GENERAL_BUCKET]:
            counts[label] = counts.get(label, 0) + 1
    return list(counts.items())
