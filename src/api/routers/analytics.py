"""POST /analytics/categories, POST /analytics/ranges -- chart-ready bucket series."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from src.analytics.categories import bucket_categories, tally_labels
from src.analytics.charts import build_chart
from src.analytics.presets import get_preset, load_range_presets
from src.analytics.ranges import MILLIONS, bucket_ranges
from src.core.config import get_settings

router = APIRouter()



class CategoryRequest(BaseModel):
    entries: list[Any] | dict[str, Any] | None = Field(
        None, description="(label, count) pairs or a label -> count mapping",
    )
    records: list[Any] | None = Field(
        None, description="Raw per-record label fields, e.g. 'Fintech, AI'",
    )
    top_n: int | None = Field(None, ge=1, le=1000)
    apply_stoplist: bool = True
    title: str = "Distribution"


class RangeItem(BaseModel):
    label: str
    lower: float | None = None
    upper: float | None = None


class RangeRequest(BaseModel):
    values: list[Any] = Field(..., description="Raw numeric-like values, e.g. '$1.5B', '250K', null")
    preset: str | None = Field(None, description="Named preset, e.g. 'revenue'")
    ranges: list[RangeItem] | None = Field(None, description="Explicit ranges, lowest first")
    unit: float = Field(MILLIONS, gt=0)
    bare_unit: float | None = Field(None, gt=0)
    title: str = "Distribution"


class BucketItem(BaseModel):
    name: str
    value: float


class BucketResponse(BaseModel):
    buckets: list[BucketItem]
    chart: dict



@router.post("/categories", response_model=BucketResponse)
def categories_endpoint(req: CategoryRequest):
    """Top-N categories plus an 'Others' tail."""
    if req.entries is None and req.records is None:
        raise HTTPException(status_code=422, detail="Provide either 'entries' or 'records'.")

    entries = req.entries
    if entries is None:
        entries = tally_labels(req.records, apply_stoplist=req.apply_stoplist)

    top_n = req.top_n or get_settings().category_top_n
    buckets = bucket_categories(entries, top_n=top_n, apply_stoplist=req.apply_stoplist)
    return BucketResponse(
        buckets=[BucketItem(**b.to_dict()) for b in buckets],
        chart=build_chart(buckets, req.title).to_dict(),
    )


@router.post("/ranges", response_model=BucketResponse)
def ranges_endpoint(req: RangeRequest):
    """Count raw values into ordered numeric ranges."""
    if req.preset:
        preset = get_preset(req.preset)
        if preset is None:
            raise HTTPException(status_code=404, detail=f"Unknown range preset '{req.preset}'")
        ranges, unit, bare_unit = preset.ranges, preset.unit, preset.bare_unit
    elif req.ranges:
        ranges = [(r.label, r.lower, r.upper) for r in req.ranges]
        unit, bare_unit = req.unit, req.bare_unit
    else:
        raise HTTPException(status_code=422, detail="Provide either 'preset' or 'ranges'.")

    try:
        buckets = bucket_ranges(req.values, ranges, unit=unit, bare_unit=bare_unit)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return BucketResponse(
        buckets=[BucketItem(**b.to_dict()) for b in buckets],
        chart=build_chart(buckets, req.title, ordered=True).to_dict(),
    )


@router.get("/ranges/presets")
def presets_endpoint() -> dict:
    """List the named range presets."""
    return {"presets": [p.to_dict() for p in load_range_presets().values()]}
