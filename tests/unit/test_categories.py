"""
Unit tests -- category bucketing and label tallies.
"""
import pytest

from src.analytics.buckets import BucketEntry, total
from src.analytics.categories import (
    GENERAL_BUCKET,
    OTHERS_BUCKET,
    bucket_categories,
    is_non_informative,
    tally_labels,
)


def _pairs(buckets):
    return [(b.name, b.value) for b in buckets]


# ── bucket_categories ───────────────────────────────────

def test_top_n_with_others():
    data = [("A", 50), ("B", 30), ("C", 3), ("D", 1), ("E", 1)]
    result = bucket_categories(data, top_n=3, apply_stoplist=False)
    assert result == [
        BucketEntry("A", 50), BucketEntry("B", 30), BucketEntry("C", 3), BucketEntry(OTHERS_BUCKET, 2),
    ]


def test_others_omitted_when_nothing_left():
    result = bucket_categories([("Fintech", 4), ("Health", 2)], top_n=5)
    assert OTHERS_BUCKET not in [b.name for b in result]


def test_stoplist_folds_into_general():
    data = [("Industry agnostic", 10), ("Fintech", 8), ("Various", 3), ("AI", 2)]
    assert _pairs(bucket_categories(data)) == [(GENERAL_BUCKET, 15), ("Fintech", 8)]


def test_stoplist_disabled_keeps_labels():
    result = bucket_categories([("Various", 3), ("Fintech", 1)], apply_stoplist=False)
    assert _pairs(result) == [("Various", 3), ("Fintech", 1)]


def test_labels_merged_after_case_normalisation():
    assert _pairs(bucket_categories([("fintech", 3), ("Fintech", 2)])) == [("Fintech", 5)]


def test_ties_keep_first_seen_order():
    result = bucket_categories([("Beta", 5), ("Alpha", 5), ("Gamma", 9)])
    assert [b.name for b in result] == ["Gamma", "Beta", "Alpha"]


def test_large_dataset_is_bounded():
    data = [(f"Category {i}", i + 1) for i in range(2000)]
    result = bucket_categories(data)
    assert len(result) == 16
    assert result[0] == BucketEntry("Category 1999", 2000)
    assert result[-1].name == OTHERS_BUCKET
    assert total(result) == sum(count for _, count in data)


def test_mapping_input():
    assert _pairs(bucket_categories({"Fintech": 3, "Health": 7})) == [("Health", 7), ("Fintech", 3)]


def test_malformed_pairs_skipped():
    data = [("Fintech", 3), (None, 2), ("Health", "lots"), None, ("Retail", True), ("Energy",)]
    assert _pairs(bucket_categories(data)) == [("Fintech", 3)]


def test_blank_labels_keep_their_count():
    data = [("Fintech", 3), ("", 2), ("  ", 4)]
    result = bucket_categories(data)
    assert _pairs(result) == [(GENERAL_BUCKET, 6), ("Fintech", 3)]
    assert total(result) == 9


def test_blank_labels_counted_without_stoplist():
    result = bucket_categories([("Fintech", 3), ("", 2)], apply_stoplist=False)
    assert _pairs(result) == [("Fintech", 3), (GENERAL_BUCKET, 2)]


def test_substring_stoplist_matches():
    result = bucket_categories([("Generalist", 3), ("Smallcap", 2), ("Fintech", 1)])
    assert _pairs(result) == [(GENERAL_BUCKET, 5), ("Fintech", 1)]


def test_empty_input():
    assert bucket_categories([]) == []


def test_non_list_input_raises():
    with pytest.raises(TypeError):
        bucket_categories("Fintech")


def test_invalid_top_n_raises():
    with pytest.raises(ValueError):
        bucket_categories([("Fintech", 1)], top_n=0)


@pytest.mark.parametrize("label,expected", [
    ("Industry Agnostic", True),
    ("ALL", True),
    ("Multiple sectors", True),
    ("AI", True),
    ("  x ", True),
    ("Small business", True),
    ("Generalist recruiting", True),
    ("Smallcap", True),
    ("Fintech", False),
])
def test_is_non_informative(label, expected):
    assert is_non_informative(label) is expected


# ── tally_labels ────────────────────────────────────────

def test_tally_labels():
    records = [
        "Fintech, AI Tools",
        "fintech; Health",
        "Industry agnostic",
        None,
        ["Health", "Health"],
        "unknown",
    ]
    assert dict(tally_labels(records)) == {
        "Fintech": 2,
        "AI Tools": 1,
        "Health": 2,
        GENERAL_BUCKET: 3,
    }


def test_tally_then_bucket():
    records = ["Fintech", "Fintech|Health", "Retail", "Various"]
    result = bucket_categories(tally_labels(records), top_n=2)
    assert _pairs(result) == [("Fintech", 2), ("Health", 1), (OTHERS_BUCKET, 2)]


def test_tally_rejects_non_list():
    with pytest.raises(TypeError):
        tally_labels("Fintech, Health")
