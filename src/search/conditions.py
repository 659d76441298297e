"""
Condition model -- the structured filter language sent to the companies
search backend.

A ``Condition`` is one attribute/operator/sign/values clause.  The
combinator (``operator``) lives on each condition rather than on the set,
so a single ``ConditionSet`` may mix ``or`` and ``and`` clauses; the
backend decides how they compose and we transmit them verbatim.

``ConditionSet`` is an ordered, immutable sequence.  Void conditions
(blank attribute or no non-blank values) are dropped whenever a set is
built, so they can never be sent upstream.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Iterator, Mapping

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from src.core.logging import get_logger

logger = get_logger(__name__)


class ConditionOperator(str, Enum):
    OR = "or"
    AND = "and"


class ConditionSign(str, Enum):
    EQUALS = "equals"
    EXACT_EQUALS = "exactEquals"
    GREATER = "greater"
    LOWER = "lower"
    NOT_EQUALS = "notEquals"


# Filter values meaning "no filter applied"
NO_FILTER_SENTINELS = frozenset({"", "all"})


class Condition(BaseModel):
    """One filter clause."""

    model_config = ConfigDict(frozen=True)

    attribute: str = Field(..., description="Backend field path, e.g. 'about.industries' or 'ai.search'")
    operator: ConditionOperator = Field(
        ConditionOperator.OR,
        description="How this clause combines with the other clauses in the set",
    )
    sign: ConditionSign = Field(ConditionSign.EQUALS, description="Comparison applied to each value")
    values: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Candidate values; any one may match",
    )

    @field_validator("values", mode="before")
    @classmethod
    def _coerce_values(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            trimmed = (str(item).strip() for item in v if item is not None)
            return tuple(text for text in trimmed if text)
        return v

    @property
    def is_void(self) -> bool:
        return not self.attribute.strip() or not self.values


class ConditionSet(RootModel[tuple[Condition, ...]]):
    """Ordered conditions for one query.  Serializes as a JSON array."""

    model_config = ConfigDict(frozen=True)

    root: tuple[Condition, ...] = ()

    @field_validator("root", mode="after")
    @classmethod
    def _drop_void(cls, conditions: tuple[Condition, ...]) -> tuple[Condition, ...]:
        kept = tuple(c for c in conditions if not c.is_void)
        if len(kept) != len(conditions):
            logger.debug("Dropped %d void condition(s)", len(conditions) - len(kept))
        return kept

    def __iter__(self) -> Iterator[Condition]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> Condition:
        return self.root[index]

    @property
    def is_empty(self) -> bool:
        return not self.root

    def append(self, condition: Condition) -> ConditionSet:
        """Return a new set with *condition* at the end."""
        return ConditionSet(self.root + (condition,))

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, raw: str) -> ConditionSet:
        return cls.model_validate_json(raw)


# ── UI filter keys → backend attributes ────────────────

ATTRIBUTE_OPTIONS: list[dict[str, str]] = [
    {"value": "about.industries", "label": "Industries"},
    {"value": "locations.headquarters.country.code", "label": "Country"},
    {"value": "about.businessType", "label": "Business Type"},
    {"value": "about.totalEmployees", "label": "Total Employees"},
    {"value": "analytics.monthlyVisitors", "label": "Monthly Visitors"},
    {"value": "finances.revenue", "label": "Revenue"},
    {"value": "about.yearFounded", "label": "Year Founded"},
]

FILTER_ATTRIBUTES: dict[str, str] = {
    "industry": "about.industries",
    "country": "locations.headquarters.country.code",
    "businessType": "about.businessType",
    "employees": "about.totalEmployees",
    "visitors": "analytics.monthlyVisitors",
    "revenue": "finances.revenue",
    "founded": "about.yearFounded",
}

# Numeric range filters: key -> (attribute, sign)
RANGE_FILTERS: dict[str, tuple[str, ConditionSign]] = {
    "minEmployees": ("about.totalEmployees", ConditionSign.GREATER),
    "maxEmployees": ("about.totalEmployees", ConditionSign.LOWER),
    "minRevenue": ("finances.revenue", ConditionSign.GREATER),
    "maxRevenue": ("finances.revenue", ConditionSign.LOWER),
    "minVisitors": ("analytics.monthlyVisitors", ConditionSign.GREATER),
    "maxVisitors": ("analytics.monthlyVisitors", ConditionSign.LOWER),
    "foundedAfter": ("about.yearFounded", ConditionSign.GREATER),
    "foundedBefore": ("about.yearFounded", ConditionSign.LOWER),
}


def _clean_values(raw: Any) -> list[str]:
    """Trim, drop blanks / sentinels and de-duplicate, keeping first-seen order."""
    if raw is None:
        return []
    items = raw if isinstance(raw, (list, tuple)) else [raw]
    cleaned: list[str] = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text.lower() in NO_FILTER_SENTINELS or text in cleaned:
            continue
        cleaned.append(text)
    return cleaned


def build_conditions(
    filters: Mapping[str, Any],
    operator: ConditionOperator = ConditionOperator.OR,
) -> ConditionSet:
    """Build a ConditionSet from UI filter selections.

    Parameters
    ----------
    filters : Mapping[str, Any]
        Filter key -> selected value (a string, number or list of them).
        Keys are taken in mapping order.
    operator : ConditionOperator
        Combinator stamped on every generated condition.
    """
    if not isinstance(filters, Mapping):
        raise TypeError(f"filters must be a mapping, got {type(filters).__name__}")

    conditions: list[Condition] = []
    for key, raw in filters.items():
        values = _clean_values(raw)
        if not values:
            continue
        if key in RANGE_FILTERS:
            attribute, sign = RANGE_FILTERS[key]
        else:
            attribute, sign = FILTER_ATTRIBUTES.get(key, key), ConditionSign.EQUALS
        conditions.append(
            Condition(attribute=attribute, operator=operator, sign=sign, values=values)
        )
    return ConditionSet(tuple(conditions))
