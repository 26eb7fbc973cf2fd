"""Document store collaborator used for orders and user profiles.

The application talks to the store through ``DocumentStore``: live
subscriptions deliver full snapshots of a collection, and every write is
keyed by an opaque document id. ``InMemoryDocumentStore`` is the local
implementation; it notifies subscribers synchronously after each write.
"""

from __future__ import annotations

import inspect
import threading
import uuid
import weakref
from typing import Any, Callable, Iterable, Mapping, Protocol

from core.logging_setup import get_logger

__all__ = [
    "ORDERS_COLLECTION",
    "USERS_COLLECTION",
    "DocumentStore",
    "InMemoryDocumentStore",
    "Snapshot",
    "SnapshotListener",
    "StoreError",
    "Unsubscribe",
]

ORDERS_COLLECTION = "orders"
USERS_COLLECTION = "users"

Snapshot = list[tuple[str, dict[str, Any]]]
SnapshotListener = Callable[[Snapshot], None]
Unsubscribe = Callable[[], None]

_logger = get_logger("order_tracker.store")


class StoreError(RuntimeError):
    """Raised when a store read or write fails."""


class DocumentStore(Protocol):
    def subscribe(self, collection: str, listener: SnapshotListener) -> Unsubscribe: ...

    async def create(self, collection: str, record: Mapping[str, Any]) -> str: ...

    async def put(self, collection: str, doc_id: str, record: Mapping[str, Any]) -> None: ...

    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None: ...

    async def delete_batch(self, collection: str, doc_ids: Iterable[str]) -> None: ...

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None: ...

    async def list_documents(self, collection: str) -> Snapshot: ...


def _listener_ref(listener: SnapshotListener) -> Callable[[], SnapshotListener | None]:
    """Bound methods are held weakly so a dropped session stops listening."""

    if inspect.ismethod(listener):
        return weakref.WeakMethod(listener)
    return lambda: listener


class InMemoryDocumentStore:
    """Dict-backed store; snapshots are taken and delivered under the lock,
    so every listener sees them in write order.
    """

    def __init__(self, initial: Mapping[str, Mapping[str, Mapping[str, Any]]] | None = None) -> None:
        self._lock = threading.RLock()
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._listeners: dict[str, list[Callable[[], SnapshotListener | None]]] = {}
        for collection, docs in (initial or {}).items():
            self._collections[collection] = {doc_id: dict(data) for doc_id, data in docs.items()}

    def snapshot(self, collection: str) -> Snapshot:
        with self._lock:
            docs = self._collections.get(collection, {})
            return [(doc_id, dict(data)) for doc_id, data in docs.items()]

    def subscribe(self, collection: str, listener: SnapshotListener) -> Unsubscribe:
        """Register ``listener`` and deliver the current snapshot immediately."""

        ref = _listener_ref(listener)
        with self._lock:
            self._listeners.setdefault(collection, []).append(ref)
            listener(self.snapshot(collection))

        def unsubscribe() -> None:
            with self._lock:
                refs = self._listeners.get(collection, [])
                if ref in refs:
                    refs.remove(ref)

        return unsubscribe

    def _notify(self, collection: str) -> None:
        with self._lock:
            refs = self._listeners.get(collection, [])
            live = [(ref, ref()) for ref in refs]
            dropped = [ref for ref, listener in live if listener is None]
            for ref in dropped:
                refs.remove(ref)
            if dropped:
                _logger.debug("Dropped %d collected listener(s) on %s", len(dropped), collection)

            snapshot = self.snapshot(collection)
            for _, listener in live:
                if listener is not None:
                    listener(list(snapshot))

    async def create(self, collection: str, record: Mapping[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        await self.put(collection, doc_id, record)
        return doc_id

    async def put(self, collection: str, doc_id: str, record: Mapping[str, Any]) -> None:
        with self._lock:
            self._collections.setdefault(collection, {})[doc_id] = dict(record)
        _logger.debug("Stored %s/%s", collection, doc_id)
        self._notify(collection)

    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        with self._lock:
            docs = self._collections.get(collection, {})
            if doc_id not in docs:
                raise StoreError(f"No document {collection}/{doc_id} to update")
            docs[doc_id].update(fields)
        self._notify(collection)

    async def delete_batch(self, collection: str, doc_ids: Iterable[str]) -> None:
        ids = list(doc_ids)
        with self._lock:
            docs = self._collections.get(collection, {})
            for doc_id in ids:
                docs.pop(doc_id, None)
        _logger.info("Deleted %d document(s) from %s", len(ids), collection)
        self._notify(collection)

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        with self._lock:
            data = self._collections.get(collection, {}).get(doc_id)
            return None if data is None else dict(data)

    async def list_documents(self, collection: str) -> Snapshot:
        return self.snapshot(collection)
