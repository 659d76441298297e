"""
Search dispatcher -- picks the query mode for a request, runs it against
the backend, and returns one unified outcome.

Modes (recomputed from the request on every call, never stored):

  idle             no prompt, no conditions -> nothing is queried
  conditions_only  conditions, no prompt    -> conditions endpoint
  prompt_driven    prompt present           -> prompt endpoint, or the
                                               conditions endpoint with the
                                               prompt merged in as an
                                               ``ai.search`` condition

Requests are immutable: changing the prompt or the conditions yields a
new request back on page 1, changing the page keeps the filters.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.core.config import get_settings
from src.core.logging import get_logger
from src.core.utils import timer
from src.search.backend import (
    CONDITIONS_ENDPOINT,
    PROMPT_ENDPOINT,
    SearchBackend,
    get_backend,
)
from src.search.cache import ResultCache, get_cache
from src.search.combiner import combine, has_prompt, serialize
from src.search.conditions import ConditionSet
from src.search.errors import (
    SearchBackendError,
    SearchStatus,
    failure_message,
    is_no_results,
)
from src.search.pagination import (
    DEFAULT_PAGE_SIZE,
    MAX_VISIBLE_PAGES,
    PageWindow,
    PaginationDescriptor,
    normalize,
    page_window,
    summary_text,
)
from src.search.sorting import infer_sort

logger = get_logger(__name__)

IDLE_MESSAGE = "Use the search bar or set conditions to find companies"
NO_RESULTS_MESSAGE = "No companies match your current search criteria"


class QueryMode(str, Enum):
    IDLE = "idle"
    CONDITIONS_ONLY = "conditions_only"
    PROMPT_DRIVEN = "prompt_driven"


class SearchRequest(BaseModel):
    """Everything one search interaction needs."""

    model_config = ConfigDict(frozen=True)

    prompt: str = ""
    conditions: ConditionSet = Field(default_factory=ConditionSet)
    page: int = Field(1, ge=1)
    page_size: int = Field(DEFAULT_PAGE_SIZE, gt=0)
    sort_key: str | None = None
    sort_order: str | None = None

    def _replace(self, **changes: Any) -> SearchRequest:
        return SearchRequest(**{**dict(self), **changes})

    def with_prompt(self, prompt: str) -> SearchRequest:
        return self._replace(prompt=prompt, page=1)

    def with_conditions(self, conditions: ConditionSet) -> SearchRequest:
        return self._replace(conditions=conditions, page=1)

    def with_page(self, page: int) -> SearchRequest:
        return self._replace(page=page)


@dataclass(frozen=True)
class QueryPlan:
    mode: QueryMode
    endpoint: str
    params: dict[str, str] = field(default_factory=dict)


class SearchOutcome(BaseModel):
    """The unified "current result set" handed to consumers."""

    status: SearchStatus
    mode: QueryMode
    companies: list[dict[str, Any]] = Field(default_factory=list)
    pagination: PaginationDescriptor = Field(default_factory=PaginationDescriptor)
    window: PageWindow | None = None
    message: str = ""
    latency_ms: int = 0
    cached: bool = False

    @property
    def has_active_search(self) -> bool:
        return self.mode is not QueryMode.IDLE

    @property
    def summary(self) -> str:
        return summary_text(self.pagination)


# ── Mode selection ──────────────────────────────────────


def select_mode(request: SearchRequest) -> QueryMode:
    if has_prompt(request.prompt):
        return QueryMode.PROMPT_DRIVEN
    if not request.conditions.is_empty:
        return QueryMode.CONDITIONS_ONLY
    return QueryMode.IDLE


def plan_query(request: SearchRequest) -> QueryPlan | None:
    """Translate a request into endpoint + query parameters (None when idle)."""
    mode = select_mode(request)
    if mode is QueryMode.IDLE:
        return None

    params = {"page": str(request.page), "pageSize": str(request.page_size)}
    sort_key, sort_order = request.sort_key, request.sort_order

    if request.conditions.is_empty:
        endpoint = PROMPT_ENDPOINT
        params["prompt"] = request.prompt
        if sort_key is None:
            sort_key, inferred_order = infer_sort(request.prompt)
            sort_order = sort_order or inferred_order
    else:
        endpoint = CONDITIONS_ENDPOINT
        conditions = (
            combine(request.conditions, request.prompt)
            if mode is QueryMode.PROMPT_DRIVEN
            else request.conditions
        )
        params["conditions"] = serialize(conditions)

    if sort_key:
        params["sortKey"] = sort_key
        if sort_order:
            params["sortOrder"] = sort_order
    return QueryPlan(mode=mode, endpoint=endpoint, params=params)


# ── Dispatcher ──────────────────────────────────────────


def _extract_companies(envelope: Any) -> list[dict[str, Any]]:
    if not isinstance(envelope, Mapping):
        logger.warning("Result envelope is %s, not an object", type(envelope).__name__)
        return []
    companies = envelope.get("companies")
    if companies is None:
        return []
    if not isinstance(companies, list):
        logger.warning("Envelope 'companies' is %s, not a list", type(companies).__name__)
        return []
    return [dict(c) for c in companies if isinstance(c, Mapping)]


def _envelope_message(envelope: Any) -> str:
    """The envelope's ``message`` when it is a string, else ""."""
    if not isinstance(envelope, Mapping):
        return ""
    message = envelope.get("message")
    if not isinstance(message, str):
        if message is not None:
            logger.warning("Envelope 'message' is %s, not a string", type(message).__name__)
        return ""
    return message


class Dispatcher:
    """Runs search requests against a backend, memoising successful pages."""

    def __init__(
        self,
        backend: SearchBackend,
        cache: ResultCache | None = None,
        max_visible_pages: int = MAX_VISIBLE_PAGES,
    ):
        self._backend = backend
        self._cache = cache
        self._max_visible = max_visible_pages

    def run(self, request: SearchRequest) -> SearchOutcome:
        plan = plan_query(request)
        if plan is None:
            return SearchOutcome(status=SearchStatus.IDLE, mode=QueryMode.IDLE, message=IDLE_MESSAGE)

        logger.info("Search | mode=%s | page=%d | endpoint=%s",
                    plan.mode.value, request.page, plan.endpoint)

        if self._cache is not None:
            hit = self._cache.get(plan.endpoint, plan.params)
            if hit is not None:
                return hit.model_copy(update={"cached": True, "latency_ms": 0})

        envelope: Any = None
        error: SearchBackendError | None = None
        with timer() as t:
            try:
                envelope = self._backend.fetch(plan.endpoint, plan.params)
            except SearchBackendError as exc:
                error = exc

        if error is not None:
            if is_no_results(error):
                return SearchOutcome(
                    status=SearchStatus.NO_RESULTS, mode=plan.mode,
                    message=error.message or NO_RESULTS_MESSAGE, latency_ms=t["elapsed_ms"],
                )
            logger.error("Search failed | mode=%s | %s", plan.mode.value, error)
            return SearchOutcome(
                status=SearchStatus.ERROR, mode=plan.mode,
                message=failure_message(error), latency_ms=t["elapsed_ms"],
            )

        companies = _extract_companies(envelope)
        pagination = normalize(envelope)
        if not companies:
            return SearchOutcome(
                status=SearchStatus.NO_RESULTS, mode=plan.mode, pagination=pagination,
                message=_envelope_message(envelope) or NO_RESULTS_MESSAGE,
                latency_ms=t["elapsed_ms"],
            )

        outcome = SearchOutcome(
            status=SearchStatus.OK,
            mode=plan.mode,
            companies=companies,
            pagination=pagination,
            window=page_window(request.page, pagination.total_pages, self._max_visible),
            message=_envelope_message(envelope),
            latency_ms=t["elapsed_ms"],
        )
        if self._cache is not None:
            self._cache.put(plan.endpoint, plan.params, outcome)
        return outcome


def get_dispatcher() -> Dispatcher:
    """Dispatcher wired to the shared backend client and result cache."""
    return Dispatcher(get_backend(), get_cache(), get_settings().max_visible_pages)
