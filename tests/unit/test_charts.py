"""
Unit tests -- chart type selection for bucket series.
"""
from src.analytics.buckets import BucketEntry
from src.analytics.charts import (
    CHART_BAR,
    CHART_PIE,
    CHART_TABLE,
    build_chart,
    build_title,
)


def _buckets(n):
    return [BucketEntry(f"Label {i}", n - i) for i in range(n)]


def test_empty_series_is_table():
    assert build_chart([], "Companies by Industry").chart_type == CHART_TABLE


def test_few_buckets_is_pie():
    assert build_chart(_buckets(4), "x").chart_type == CHART_PIE


def test_many_buckets_is_bar():
    assert build_chart(_buckets(16), "x").chart_type == CHART_BAR


def test_ordered_series_is_bar():
    assert build_chart(_buckets(3), "x", ordered=True).chart_type == CHART_BAR


def test_legend_is_capped():
    spec = build_chart(_buckets(16), "x", legend_limit=10)
    assert len(spec.buckets) == 16
    assert len(spec.legend) == 10
    assert spec.legend[0].name == "Label 0"


def test_to_dict():
    spec = build_chart([BucketEntry("Fintech", 3), BucketEntry("Others", 2)], "Companies by Industry")
    d = spec.to_dict()
    assert d["chart_type"] == CHART_PIE
    assert d["x_column"] == "name"
    assert d["y_column"] == "value"
    assert d["data"] == [{"name": "Fintech", "value": 3}, {"name": "Others", "value": 2}]
    assert d["total"] == 5


def test_build_title():
    assert build_title("companies", "business_type") == "Companies by Business Type"
