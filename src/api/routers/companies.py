"""GET /companies/search and friends -- structured + prompt company search."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, ValidationError

from src.search.cache import get_cache
from src.search.combiner import combine
from src.search.conditions import (
    ATTRIBUTE_OPTIONS,
    ConditionOperator,
    ConditionSet,
    ConditionSign,
    build_conditions,
)
from src.search.dispatcher import Dispatcher, SearchRequest, get_dispatcher
from src.search.errors import SearchStatus
from src.core.config import get_settings
from src.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()



class SearchResponse(BaseModel):
    status: SearchStatus
    mode: str
    success: bool
    has_active_search: bool
    companies: list[dict]
    pagination: dict
    window: dict | None
    summary: str
    message: str
    cached: bool
    latency_ms: int


class ConditionsRequest(BaseModel):
    filters: dict[str, Any] = Field(default_factory=dict, description="UI filter key -> selected value(s)")
    prompt: str = Field("", max_length=500, description="Optional free-text prompt to merge in")
    operator: ConditionOperator = Field(ConditionOperator.OR, description="Combinator for every condition")


class ConditionsResponse(BaseModel):
    conditions: list[dict]
    serialized: str
    count: int


class CacheStatsResponse(BaseModel):
    size: int
    max_size: int
    ttl_seconds: float
    hits: int
    misses: int
    hit_rate: float



def _parse_conditions(raw: str | None) -> ConditionSet:
    if not raw:
        return ConditionSet()
    try:
        return ConditionSet.from_json(raw)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid conditions format")


@router.get("/search", response_model=SearchResponse)
def search_endpoint(
    prompt: str = Query("", max_length=500),
    conditions: str | None = Query(None, description="JSON array of conditions"),
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, alias="pageSize", gt=0, le=100),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """Run one search page: conditions-only, prompt-driven, or idle."""
    request = SearchRequest(
        prompt=prompt,
        conditions=_parse_conditions(conditions),
        page=page,
        page_size=page_size or get_settings().search_page_size,
    )
    try:
        outcome = dispatcher.run(request)
    except Exception as exc:
        logger.exception("Company search failed")
        raise HTTPException(status_code=500, detail=str(exc))

    return SearchResponse(
        status=outcome.status,
        mode=outcome.mode.value,
        success=outcome.status is not SearchStatus.ERROR,
        has_active_search=outcome.has_active_search,
        companies=outcome.companies,
        pagination=outcome.pagination.to_dict(),
        window=outcome.window.model_dump(by_alias=True) if outcome.window else None,
        summary=outcome.summary,
        message=outcome.message,
        cached=outcome.cached,
        latency_ms=outcome.latency_ms,
    )


@router.get("/attributes")
def attributes_endpoint() -> dict:
    """Attributes, operators and signs a condition may use."""
    return {
        "attributes": ATTRIBUTE_OPTIONS,
        "operators": [o.value for o in ConditionOperator],
        "signs": [s.value for s in ConditionSign],
    }


@router.post("/conditions", response_model=ConditionsResponse)
def conditions_endpoint(req: ConditionsRequest):
    """Build (and optionally prompt-merge) a ConditionSet from UI filters."""
    conditions = combine(build_conditions(req.filters, operator=req.operator), req.prompt)
    return ConditionsResponse(
        conditions=[c.model_dump(mode="json") for c in conditions],
        serialized=conditions.to_json(),
        count=len(conditions),
    )


@router.get("/cache/stats", response_model=CacheStatsResponse)
def cache_stats_endpoint():
    """Return result cache statistics."""
    return CacheStatsResponse(**get_cache().stats())


@router.post("/cache/clear")
def cache_clear_endpoint():
    """Flush the result cache."""
    return {"cleared": get_cache().invalidate()}
