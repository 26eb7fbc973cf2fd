"""Projection pipeline feeding the tables, exporters and summaries.

``project`` is the pure composition filter -> sort -> partition. The
``ProjectionPipeline`` wraps it for the live application: store snapshots land
in a single-slot mailbox (each delivery replaces the previous one entirely)
and the projection is recomputed only when the snapshot or the view
parameters change. Everything downstream reads ``pipeline.projection`` so the
exports always match the visible tables.
"""

from __future__ import annotations

import threading
from typing import Iterable

from core.filtering import filter_orders
from core.logging_setup import get_logger
from core.models import Order, OrderType, Projection, ViewParams
from core.sorting import sort_orders

__all__ = ["ProjectionPipeline", "SnapshotMailbox", "project"]

_logger = get_logger("order_tracker.projection")


def project(orders: Iterable[Order], params: ViewParams) -> Projection:
    rows = tuple(sort_orders(filter_orders(orders, params), params.sort_option))
    income = tuple(order for order in rows if order.type is OrderType.INCOME)
    expense = tuple(order for order in rows if order.type is OrderType.EXPENSE)
    return Projection(rows=rows, income=income, expense=expense, params=params)


class SnapshotMailbox:
    """Holds only the most recent full snapshot of the order collection."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._orders: tuple[Order, ...] = ()
        self._version = 0

    def put(self, orders: Iterable[Order]) -> int:
        snapshot = tuple(orders)
        with self._lock:
            self._orders = snapshot
            self._version += 1
            return self._version

    def take(self) -> tuple[int, tuple[Order, ...]]:
        with self._lock:
            return self._version, self._orders


class ProjectionPipeline:
    def __init__(self, params: ViewParams | None = None) -> None:
        self._mailbox = SnapshotMailbox()
        self._params = params or ViewParams()
        self._cache_key: tuple[int, ViewParams] | None = None
        self._cached: Projection | None = None

    @property
    def params(self) -> ViewParams:
        return self._params

    def set_params(self, params: ViewParams) -> None:
        self._params = params

    def publish(self, orders: Iterable[Order]) -> None:
        version = self._mailbox.put(orders)
        _logger.debug("Received order snapshot v%d", version)

    @property
    def orders(self) -> tuple[Order, ...]:
        return self._mailbox.take()[1]

    @property
    def live_ids(self) -> frozenset[str]:
        return frozenset(order.id for order in self.orders)

    def find(self, order_id: str) -> Order | None:
        for order in self.orders:
            if order.id == order_id:
                return order
        return None

    @property
    def projection(self) -> Projection:
        version, orders = self._mailbox.take()
        key = (version, self._params)
        if self._cached is None or key != self._cache_key:
            self._cached = project(orders, self._params)
            self._cache_key = key
        return self._cached
