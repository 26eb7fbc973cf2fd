"""Tests for the in-memory document store."""

from __future__ import annotations

import asyncio
import gc
import threading
import weakref

import pytest

from core.ledger import OrderLedger
from core.store import ORDERS_COLLECTION, InMemoryDocumentStore, StoreError


def _record(name: str) -> dict:
    return {"name": name, "date": "2024-03-01", "type": "income", "status": "pending", "addedBy": "x"}


def test_subscribe_delivers_current_snapshot_then_updates():
    store = InMemoryDocumentStore({ORDERS_COLLECTION: {"a": _record("A")}})
    seen: list[list[str]] = []

    unsubscribe = store.subscribe(ORDERS_COLLECTION, lambda snap: seen.append([doc_id for doc_id, _ in snap]))
    asyncio.run(store.put(ORDERS_COLLECTION, "b", _record("B")))
    unsubscribe()
    asyncio.run(store.put(ORDERS_COLLECTION, "c", _record("C")))

    assert seen == [["a"], ["a", "b"]]


def test_update_is_a_partial_merge():
    store = InMemoryDocumentStore({ORDERS_COLLECTION: {"a": _record("A")}})

    asyncio.run(store.update(ORDERS_COLLECTION, "a", {"status": "completed"}))

    assert asyncio.run(store.get(ORDERS_COLLECTION, "a")) == {**_record("A"), "status": "completed"}
    with pytest.raises(StoreError):
        asyncio.run(store.update(ORDERS_COLLECTION, "missing", {"status": "completed"}))


def test_concurrent_writers_never_deliver_an_older_snapshot():
    store = InMemoryDocumentStore()
    sizes: list[int] = []
    store.subscribe(ORDERS_COLLECTION, lambda snap: sizes.append(len(snap)))

    def writer(prefix: str) -> None:
        for i in range(50):
            asyncio.run(store.put(ORDERS_COLLECTION, f"{prefix}-{i}", _record(prefix)))

    threads = [threading.Thread(target=writer, args=(f"w{n}",)) for n in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sizes == sorted(sizes)
    assert sizes[-1] == 300


def test_abandoned_ledger_is_not_kept_alive_by_its_subscription(admin_user):
    store = InMemoryDocumentStore({ORDERS_COLLECTION: {"a": _record("A")}})
    ledger = OrderLedger(store, admin_user)
    ledger.start()
    ledger_ref = weakref.ref(ledger)

    del ledger
    gc.collect()

    assert ledger_ref() is None
    asyncio.run(store.put(ORDERS_COLLECTION, "b", _record("B")))
    assert store._listeners[ORDERS_COLLECTION] == []
