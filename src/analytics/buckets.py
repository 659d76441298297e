"""
BucketEntry -- one named, counted slot of a chart-ready series.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class BucketEntry:
    name: str
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value}


def total(buckets: Iterable[BucketEntry]) -> float:
    return sum(b.value for b in buckets)
