"""Stable orderings for the six table sort modes."""

from __future__ import annotations

from typing import Iterable

from core.collation import ref_sort_key, text_sort_key
from core.formatting import parse_order_date
from core.models import Order, SortOption

__all__ = ["sort_orders"]


def _sort_by_date(orders: list[Order], descending: bool) -> list[Order]:
    dated: list[tuple[int, Order]] = []
    undated: list[Order] = []
    for order in orders:
        timestamp = parse_order_date(order.date)
        if timestamp is None:
            undated.append(order)
        else:
            dated.append((timestamp.value, order))

    dated.sort(key=lambda item: item[0], reverse=descending)
    return [order for _, order in dated] + undated


def sort_orders(orders: Iterable[Order], option: SortOption | str | None) -> list[Order]:
    """Return a new list ordered by ``option``.

    Ties keep their input order in every mode, descending ones included.
    Orders with an unreadable date go last under both date modes.
    """

    mode = SortOption.coerce(option)
    rows = list(orders)

    if mode in (SortOption.DATE_DESC, SortOption.DATE_ASC):
        return _sort_by_date(rows, mode.descending)
    if mode in (SortOption.NAME_ASC, SortOption.NAME_DESC):
        return sorted(rows, key=lambda order: text_sort_key(order.name), reverse=mode.descending)
    return sorted(rows, key=lambda order: ref_sort_key(order.ref), reverse=mode.descending)
