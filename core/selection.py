"""Selection of orders for batch actions."""

from __future__ import annotations

from typing import AbstractSet, Iterable

__all__ = ["SelectionTracker"]


class SelectionTracker:
    """Set of selected order ids that survives filter changes.

    Ids of deleted orders are dropped by ``reconcile`` when a new snapshot
    arrives; until then pass ``live_ids`` to the query methods to ignore them.
    """

    def __init__(self, selected: Iterable[str] = ()) -> None:
        self._selected: set[str] = set(selected)

    def toggle(self, order_id: str) -> None:
        if order_id in self._selected:
            self._selected.discard(order_id)
        else:
            self._selected.add(order_id)

    def is_selected(self, order_id: str) -> bool:
        return order_id in self._selected

    def is_all_visible_selected(self, visible_ids: Iterable[str]) -> bool:
        ids = list(visible_ids)
        return bool(ids) and all(order_id in self._selected for order_id in ids)

    def select_all_visible(self, visible_ids: Iterable[str]) -> None:
        """Toggle the visible subset; selections outside it are left alone."""

        ids = list(visible_ids)
        if not ids:
            return
        if self.is_all_visible_selected(ids):
            self._selected.difference_update(ids)
        else:
            self._selected.update(ids)

    def selected_ids(self, live_ids: AbstractSet[str] | None = None) -> frozenset[str]:
        if live_ids is None:
            return frozenset(self._selected)
        return frozenset(self._selected.intersection(live_ids))

    def count(self, live_ids: AbstractSet[str] | None = None) -> int:
        return len(self.selected_ids(live_ids))

    def reconcile(self, live_ids: AbstractSet[str]) -> None:
        self._selected.intersection_update(live_ids)

    def clear(self) -> None:
        self._selected.clear()

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, order_id: object) -> bool:
        return order_id in self._selected
