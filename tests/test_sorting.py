"""Tests for collation keys and the six sort modes."""

from __future__ import annotations

import pytest

from core.collation import ref_sort_key, text_sort_key
from core.models import SortOption, ViewParams
from core.projection import project
from core.sorting import sort_orders


def _refs(orders):
    return [o.ref for o in orders]


def test_ref_ascending_is_numeric_aware(make_order):
    orders = [make_order("a", ref="10"), make_order("b", ref="2"), make_order("c", ref="1")]

    assert _refs(sort_orders(orders, SortOption.REF_ASC)) == ["1", "2", "10"]
    assert _refs(sort_orders(orders, SortOption.REF_DESC)) == ["10", "2", "1"]


def test_embedded_digit_runs_compare_by_value(make_order):
    orders = [make_order("a", ref="INV-12"), make_order("b", ref="INV-2"), make_order("c", ref="INV-100")]

    assert _refs(sort_orders(orders, "ref-asc")) == ["INV-2", "INV-12", "INV-100"]


def test_missing_ref_sorts_first_and_does_not_crash(make_order):
    orders = [make_order("a", ref="5"), make_order("b", ref=None), make_order("c", ref="")]

    assert [o.id for o in sort_orders(orders, SortOption.REF_ASC)] == ["b", "c", "a"]


def test_arabic_indic_digits_are_numeric():
    assert ref_sort_key("٢") < ref_sort_key("١٠")
    assert ref_sort_key("INV-٢") == ref_sort_key("INV-2")
    assert ref_sort_key(None) == ref_sort_key("")


def test_name_sort_uses_collation_not_codepoints(make_order):
    orders = [make_order("1", name="banana"), make_order("2", name="Apple"), make_order("3", name="cherry")]

    assert [o.name for o in sort_orders(orders, SortOption.NAME_ASC)] == ["Apple", "banana", "cherry"]


def test_arabic_harakat_are_ignored_at_primary_level(make_order):
    # Codepoint order would put the unvowelled word first.
    orders = [make_order("1", name="بيع"), make_order("2", name="بَيت")]

    assert [o.name for o in sort_orders(orders, SortOption.NAME_ASC)] == ["بَيت", "بيع"]
    assert [o.name for o in sort_orders(orders, SortOption.NAME_DESC)] == ["بيع", "بَيت"]


def test_text_keys_order_case_insensitively_at_primary_level():
    assert text_sort_key("apple") < text_sort_key("Banana") < text_sort_key("cherry")
    assert text_sort_key("same") == text_sort_key("same")


def test_very_long_digit_runs_sort_without_error(make_order):
    huge = "9" * 5000
    orders = [make_order("a", ref=huge), make_order("b", ref="1"), make_order("c", ref="8" * 5000)]

    projection = project(orders, ViewParams(sort_option=SortOption.REF_ASC))

    assert [o.id for o in projection.rows] == ["b", "c", "a"]


def test_leading_zeros_do_not_change_numeric_rank(make_order):
    orders = [make_order("a", ref="010"), make_order("b", ref="9"), make_order("c", ref="0009")]

    assert [o.id for o in sort_orders(orders, SortOption.REF_ASC)] == ["b", "c", "a"]


def test_date_modes_and_unparseable_dates_last(make_order):
    orders = [
        make_order("mid", date="2024-02-01"),
        make_order("bad", date="whenever"),
        make_order("new", date="2024-03-01T10:00:00+02:00"),
        make_order("old", date="2023-12-31"),
    ]

    assert [o.id for o in sort_orders(orders, SortOption.DATE_DESC)] == ["new", "mid", "old", "bad"]
    assert [o.id for o in sort_orders(orders, SortOption.DATE_ASC)] == ["old", "mid", "new", "bad"]


@pytest.mark.parametrize("mode", list(SortOption))
def test_sort_is_stable_for_equal_keys(make_order, mode):
    orders = [
        make_order("first", name="Same", ref="7", date="2024-01-01"),
        make_order("second", name="Same", ref="7", date="2024-01-01"),
        make_order("third", name="Same", ref="7", date="2024-01-01"),
    ]

    assert [o.id for o in sort_orders(orders, mode)] == ["first", "second", "third"]


def test_sort_returns_new_list_and_unknown_mode_defaults(make_order):
    orders = [make_order("a", date="2024-01-01"), make_order("b", date="2024-02-01")]
    snapshot = list(orders)

    result = sort_orders(orders, "nonsense")

    assert [o.id for o in result] == ["b", "a"]
    assert orders == snapshot
    assert result is not orders
