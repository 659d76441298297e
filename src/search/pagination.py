"""
Pagination normalisation.

The search backend answers with one of two envelope shapes:

  nested  ``{companies: [...], pagination: {page, pageSize, total, hasMore}}``
  flat    ``{companies: [...], page, pageSize, total, hasMore}``

``normalize`` resolves the shape once and returns a canonical
``PaginationDescriptor``; nothing downstream branches on shape again.
A body matching neither shape degrades to the default descriptor and is
logged rather than raised.
"""
from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from src.core.logging import get_logger
from src.core.utils import coerce_bool, coerce_int

logger = get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
DEFAULT_TOTAL = 0
MAX_VISIBLE_PAGES = 5

_FLAT_FIELDS = ("page", "pageSize", "total", "hasMore")


class EnvelopeShape(str, Enum):
    NESTED = "nested"
    FLAT = "flat"
    UNKNOWN = "unknown"


class PaginationDescriptor(BaseModel):
    """Canonical pagination state for one result page."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    page: int = Field(DEFAULT_PAGE, ge=1)
    page_size: int = Field(DEFAULT_PAGE_SIZE, gt=0)
    total: int = Field(DEFAULT_TOTAL, ge=0)
    has_more: bool = False

    @computed_field(alias="totalPages")  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 0
        return -(-self.total // self.page_size)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class PageWindow(BaseModel):
    """The run of page-number controls to show around the current page."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    start: int
    end: int
    pages: list[int]
    show_ellipsis: bool
    has_previous: bool
    has_next: bool


def detect_shape(envelope: Any) -> EnvelopeShape:
    if not isinstance(envelope, Mapping):
        return EnvelopeShape.UNKNOWN
    if isinstance(envelope.get("pagination"), Mapping):
        return EnvelopeShape.NESTED
    if any(key in envelope for key in _FLAT_FIELDS):
        return EnvelopeShape.FLAT
    return EnvelopeShape.UNKNOWN


def _read_positive(source: Mapping[str, Any], key: str, default: int, minimum: int) -> int:
    raw = source.get(key)
    if raw is None:
        return default
    value = coerce_int(raw, default)
    if value < minimum:
        logger.warning("Pagination field %s=%r out of range -- using %d", key, raw, default)
        return default
    return value


def _from_fields(source: Mapping[str, Any]) -> PaginationDescriptor:
    has_more = source.get("hasMore", source.get("has_more"))
    return PaginationDescriptor(
        page=_read_positive(source, "page", DEFAULT_PAGE, 1),
        page_size=_read_positive(source, "pageSize", DEFAULT_PAGE_SIZE, 1),
        total=_read_positive(source, "total", DEFAULT_TOTAL, 0),
        has_more=coerce_bool(has_more, False),
    )


def normalize(envelope: Any) -> PaginationDescriptor:
    """Convert either backend envelope shape into a ``PaginationDescriptor``."""
    shape = detect_shape(envelope)
    if shape is EnvelopeShape.NESTED:
        return _from_fields(envelope["pagination"])
    if shape is EnvelopeShape.FLAT:
        return _from_fields(envelope)
    logger.warning(
        "Malformed result envelope (%s) -- falling back to default pagination",
        type(envelope).__name__,
    )
    return PaginationDescriptor()


def page_window(
    current_page: int,
    total_pages: int,
    max_visible: int = MAX_VISIBLE_PAGES,
) -> PageWindow:
    """Inclusive window of page-number controls centred on *current_page*."""
    start = max(1, current_page - max_visible // 2)
    end = min(total_pages, start + max_visible - 1)
    return PageWindow(
        start=start,
        end=end,
        pages=list(range(start, end + 1)),
        show_ellipsis=end < total_pages,
        has_previous=current_page > 1,
        has_next=current_page < total_pages,
    )


def summary_text(descriptor: PaginationDescriptor, current_page: int | None = None) -> str:
    page = current_page if current_page is not None else descriptor.page
    return (
        f"Showing page {page} of {descriptor.total_pages} "
        f"({descriptor.total} total results)"
    )
