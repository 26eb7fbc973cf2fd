"""Predicates narrowing the live order set to what the user asked to see."""

from __future__ import annotations

from typing import Iterable

from core.models import Order, OrderStatus, ViewParams

__all__ = [
    "filter_orders",
    "matches_date",
    "matches_search",
    "matches_status",
]


def matches_search(order: Order, search_term: str) -> bool:
    if not search_term:
        return True
    needle = search_term.lower()
    if needle in order.name.lower():
        return True
    return bool(order.ref) and needle in order.ref.lower()


def matches_date(order: Order, date_filter: str) -> bool:
    """Textual prefix match: ``"2024-03"`` matches every day of March 2024."""

    if not date_filter:
        return True
    return isinstance(order.date, str) and order.date.startswith(date_filter)


def matches_status(order: Order, status_filter: OrderStatus | None) -> bool:
    return status_filter is None or order.status == status_filter


def filter_orders(orders: Iterable[Order], params: ViewParams) -> list[Order]:
    """Return the orders passing all three predicates, in input order."""

    return [
        order
        for order in orders
        if matches_search(order, params.search_term)
        and matches_date(order, params.date_filter)
        and matches_status(order, params.status_filter)
    ]
