"""
Loads and caches the named range presets from YAML.

Each preset bundles an ordered range list with the unit its bounds are
written in, so a caller can ask for "revenue" buckets without knowing
that revenue ranges are expressed in millions.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml

from src.analytics.buckets import BucketEntry
from src.analytics.ranges import Range, bucket_ranges, validate_ranges

_PRESETS_PATH = Path(__file__).resolve().parents[2] / "analytics_layer" / "range_presets.yml"


@dataclass(frozen=True)
class RangePreset:
    name: str
    description: str
    unit: float
    bare_unit: float
    ranges: tuple[Range, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "unit": self.unit,
            "ranges": [
                {"label": r.label, "lower": r.lower, "upper": r.upper}
                for r in self.ranges
            ],
        }


def _parse_range(raw: dict[str, Any]) -> Range:
    return Range(label=str(raw["label"]), lower=raw.get("lower"), upper=raw.get("upper"))


def _parse_preset(raw: dict[str, Any]) -> RangePreset:
    ranges = tuple(_parse_range(r) for r in raw.get("ranges", []))
    if not ranges:
        raise ValueError(f"Preset '{raw.get('name')}' declares no ranges")
    validate_ranges(ranges)
    unit = float(raw.get("unit", 1))
    return RangePreset(
        name=raw["name"],
        description=raw.get("description", ""),
        unit=unit,
        bare_unit=float(raw.get("bare_unit", unit)),
        ranges=ranges,
    )


@lru_cache
def load_range_presets() -> dict[str, RangePreset]:
    """Load and cache every preset, keyed by name, in file order."""
    with open(_PRESETS_PATH) as f:
        raw = yaml.safe_load(f)
    return {p["name"]: _parse_preset(p) for p in raw.get("presets", [])}


def get_preset(name: str) -> RangePreset | None:
    return load_range_presets().get(name)


def get_preset_names() -> list[str]:
    return list(load_range_presets().keys())


def bucket_preset(raw_values: Sequence[Any], name: str) -> list[BucketEntry]:
    """Bucket *raw_values* with the named preset's ranges and units."""
    preset = get_preset(name)
    if preset is None:
        raise KeyError(
            f"Unknown range preset '{name}'. Allowed: {', '.join(get_preset_names())}"
        )
    return bucket_ranges(raw_values, preset.ranges, unit=preset.unit, bare_unit=preset.bare_unit)
