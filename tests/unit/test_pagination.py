"""
Unit tests -- pagination normalisation and page windows.
"""
import pytest

from src.search.pagination import (
    EnvelopeShape,
    PaginationDescriptor,
    detect_shape,
    normalize,
    page_window,
    summary_text,
)


# ── Shape detection ─────────────────────────────────────

def test_detect_nested():
    assert detect_shape({"companies": [], "pagination": {"page": 1}}) is EnvelopeShape.NESTED


def test_detect_flat():
    assert detect_shape({"companies": [], "total": 3}) is EnvelopeShape.FLAT


@pytest.mark.parametrize("envelope", [None, [], "oops", {"companies": []}, {"pagination": "bad"}])
def test_detect_unknown(envelope):
    assert detect_shape(envelope) is EnvelopeShape.UNKNOWN


# ── normalize ───────────────────────────────────────────

def test_flat_shape():
    p = normalize({"total": 47, "pageSize": 20, "page": 2, "hasMore": True})
    assert (p.page, p.page_size, p.total, p.has_more) == (2, 20, 47, True)
    assert p.total_pages == 3


def test_nested_shape():
    p = normalize({
        "companies": [{"id": "1"}],
        "pagination": {"page": 3, "pageSize": 10, "total": 95, "hasMore": True},
    })
    assert (p.page, p.page_size, p.total, p.has_more) == (3, 10, 95, True)
    assert p.total_pages == 10


def test_nested_takes_precedence_over_flat():
    p = normalize({"page": 9, "total": 900, "pagination": {"page": 2, "total": 40}})
    assert p.page == 2
    assert p.total == 40


def test_missing_fields_default():
    p = normalize({"companies": [], "total": 5})
    assert (p.page, p.page_size, p.total, p.has_more) == (1, 20, 5, False)


@pytest.mark.parametrize("envelope", [None, [], "garbage", {"companies": []}])
def test_malformed_envelope_falls_back(envelope, caplog):
    p = normalize(envelope)
    assert p == PaginationDescriptor()
    assert p.total_pages == 0
    assert "Malformed result envelope" in caplog.text


def test_string_numbers_accepted():
    p = normalize({"page": "3", "pageSize": "10", "total": "95", "hasMore": "true"})
    assert (p.page, p.page_size, p.total, p.has_more) == (3, 10, 95, True)


def test_out_of_range_values_use_defaults():
    p = normalize({"page": 0, "pageSize": -5, "total": "abc"})
    assert (p.page, p.page_size, p.total) == (1, 20, 0)


def test_snake_case_has_more():
    assert normalize({"total": 50, "has_more": True}).has_more is True


def test_zero_total_has_zero_pages():
    assert normalize({"total": 0, "pageSize": 20}).total_pages == 0


@pytest.mark.parametrize("total,expected", [(1, 1), (20, 1), (21, 2), (40, 2), (41, 3)])
def test_total_pages_is_ceiling(total, expected):
    assert PaginationDescriptor(total=total, page_size=20).total_pages == expected


def test_to_dict_uses_wire_names():
    p = normalize({"total": 47, "pageSize": 20, "page": 2, "hasMore": True})
    assert p.to_dict() == {
        "page": 2, "pageSize": 20, "total": 47, "hasMore": True, "totalPages": 3,
    }


# ── page_window ─────────────────────────────────────────

def test_window_at_start():
    w = page_window(1, 10)
    assert w.pages == [1, 2, 3, 4, 5]
    assert w.show_ellipsis is True
    assert w.has_previous is False
    assert w.has_next is True


def test_window_centred():
    w = page_window(6, 10)
    assert (w.start, w.end) == (4, 8)
    assert w.show_ellipsis is True


def test_window_near_end():
    w = page_window(9, 10)
    assert (w.start, w.end) == (7, 10)
    assert w.show_ellipsis is False


def test_window_last_page():
    w = page_window(3, 3)
    assert w.pages == [1, 2, 3]
    assert w.has_next is False


def test_window_no_pages():
    w = page_window(1, 0)
    assert w.pages == []
    assert w.show_ellipsis is False
    assert w.has_next is False


def test_summary_text():
    p = normalize({"total": 47, "pageSize": 20, "page": 2})
    assert summary_text(p) == "Showing page 2 of 3 (47 total results)"
