"""Tests for the order filter predicates."""

from __future__ import annotations

from core.filtering import filter_orders
from core.models import OrderStatus, ViewParams


def test_search_matches_name_or_ref_case_insensitively(make_order):
    orders = [
        make_order("1", name="Blue Supplies", ref=None),
        make_order("2", name="Other", ref="INV-42"),
        make_order("3", name="Nothing", ref="X-1"),
    ]

    assert [o.id for o in filter_orders(orders, ViewParams(search_term="blue"))] == ["1"]
    assert [o.id for o in filter_orders(orders, ViewParams(search_term="inv"))] == ["2"]


def test_search_handles_arabic_text(make_order):
    orders = [make_order("1", name="مخبز البركة"), make_order("2", name="شركة الأمل")]

    assert [o.id for o in filter_orders(orders, ViewParams(search_term="البركة"))] == ["1"]


def test_empty_parameters_keep_everything_in_order(make_order):
    orders = [make_order(str(i)) for i in range(4)]

    assert filter_orders(orders, ViewParams()) == orders


def test_date_filter_is_a_textual_prefix(make_order):
    orders = [
        make_order("mar", date="2024-03-15"),
        make_order("feb", date="2024-02-15"),
        make_order("mar-ts", date="2024-03-01T09:30:00Z"),
    ]

    assert [o.id for o in filter_orders(orders, ViewParams(date_filter="2024-03"))] == ["mar", "mar-ts"]
    assert filter_orders(orders, ViewParams(date_filter="2024-3")) == []
    assert [o.id for o in filter_orders(orders, ViewParams(date_filter="2024"))] == ["mar", "feb", "mar-ts"]


def test_status_filter_and_conjunction(make_order):
    orders = [
        make_order("1", name="Alpha", status=OrderStatus.PENDING, date="2024-01-01"),
        make_order("2", name="Alpha", status=OrderStatus.COMPLETED, date="2024-01-02"),
        make_order("3", name="Beta", status=OrderStatus.PENDING, date="2024-01-03"),
    ]
    params = ViewParams(search_term="alpha", status_filter=OrderStatus.PENDING)

    assert [o.id for o in filter_orders(orders, params)] == ["1"]


def test_malformed_date_degrades_to_no_match(make_order):
    orders = [make_order("bad", date="not a date")]

    assert filter_orders(orders, ViewParams(date_filter="2024")) == []


def test_view_params_from_raw_inputs():
    params = ViewParams.from_inputs("x", "2024", "", "bogus")

    assert params.status_filter is None
    assert params.sort_option.value == "date-desc"
    assert ViewParams.from_inputs(status_filter="completed").status_filter is OrderStatus.COMPLETED
