"""
Chart specs for bucketed series.

Given a bucket list, decide how the UI should draw it and which entries
get a legend row.

Supported chart types:
  - pie    (few buckets)
  - bar    (many buckets, or an ordered range series)
  - table  (empty series)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from src.analytics.buckets import BucketEntry, total
from src.core.logging import get_logger

logger = get_logger(__name__)

CHART_BAR = "bar"
CHART_PIE = "pie"
CHART_TABLE = "table"

PIE_MAX_SLICES = 6
LEGEND_LIMIT = 10


@dataclass
class ChartSpec:
    """Describes how a bucket series should be visualised."""
    chart_type: str
    title: str
    buckets: list[BucketEntry] = field(default_factory=list)
    legend: list[BucketEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "chart_type": self.chart_type,
            "title": self.title,
            "x_column": "name",
            "y_column": "value",
            "data": [b.to_dict() for b in self.buckets],
            "legend": [b.to_dict() for b in self.legend],
            "total": total(self.buckets),
        }


def build_chart(
    buckets: Sequence[BucketEntry],
    title: str,
    ordered: bool = False,
    legend_limit: int = LEGEND_LIMIT,
) -> ChartSpec:
    """Choose a chart type for *buckets* and build a ``ChartSpec``.

    Parameters
    ----------
    buckets : sequence of BucketEntry
        Output of a category or range bucketer.
    title : str
        Chart title.
    ordered : bool
        The buckets are ordered ranges; always drawn as bars so the axis
        keeps its order.
    legend_limit : int
        Maximum number of legend rows.
    """
    data = list(buckets)
    if not data:
        return ChartSpec(chart_type=CHART_TABLE, title=title)

    if ordered or len(data) > PIE_MAX_SLICES:
        chart_type = CHART_BAR
    else:
        chart_type = CHART_PIE

    logger.debug("Chart '%s' -> %s (%d buckets)", title, chart_type, len(data))
    return ChartSpec(
        chart_type=chart_type,
        title=title,
        buckets=data,
        legend=data[:legend_limit],
    )


def build_title(subject: str, dimension: str) -> str:
    """Build e.g. "Companies by Industry" from ("companies", "industry")."""
    return f"{subject.replace('_', ' ').title()} by {dimension.replace('_', ' ').title()}"
