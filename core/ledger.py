"""Session controller tying the order view-model to its collaborators.

``OrderLedger`` owns the projection pipeline and the selection for one signed
in user. Every command checks the user's capability first, talks to the store
or the exporters, and reports the outcome as a ``Notice`` for the UI. Store
snapshots are never applied optimistically; the subscription delivers the
new state after each write.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Final, Literal

from core.ai.summary import SummaryGuard
from core.logging_setup import get_logger
from core.models import Order, OrderStatus, OrderType, Projection, User, ViewParams
from core.permissions import Capability, can, require
from core.projection import ProjectionPipeline
from core.selection import SelectionTracker
from core.store import ORDERS_COLLECTION, DocumentStore, Snapshot, StoreError, Unsubscribe
from exports.common import ExportArtifact
from exports.csv_report import export_csv
from exports.pdf_report import ExportResourceError, FontLoader, export_pdf

__all__ = [
    "ExportResult",
    "Notice",
    "OrderLedger",
    "ValidationError",
    "validate_new_order",
]

_logger = get_logger("order_tracker.ledger")

MSG_ORDER_ADDED: Final[str] = "تمت إضافة الأوردر بنجاح!"
MSG_ORDER_ADD_FAILED: Final[str] = "تعذر إضافة الأوردر. يرجى المحاولة مرة أخرى."
MSG_NAME_REQUIRED: Final[str] = "يرجى إدخال الاسم."
MSG_DATE_REQUIRED: Final[str] = "يرجى إدخال تاريخ الأوردر."
MSG_ORDER_MISSING: Final[str] = "هذا الأوردر لم يعد موجودًا."
MSG_STATUS_FAILED: Final[str] = "تعذر تحديث حالة الأوردر."
MSG_DELETED: Final[str] = "تم حذف الأوردرات المحددة بنجاح."
MSG_DELETE_FAILED: Final[str] = "فشل حذف الأوردرات المحددة. يرجى المحاولة مرة أخرى."
MSG_CSV_DONE: Final[str] = "تم تصدير CSV بنجاح."
MSG_PDF_DONE: Final[str] = "تم تصدير PDF بنجاح."
MSG_NOTHING_TO_EXPORT: Final[str] = "لا توجد بيانات لتصديرها."
MSG_PDF_FAILED: Final[str] = "حدث خطأ أثناء تحميل الخط أو تصدير PDF."


class ValidationError(ValueError):
    """Raised when a new order is missing a required field."""


@dataclass(frozen=True)
class Notice:
    level: Literal["success", "error"]
    message: str

    @classmethod
    def success(cls, message: str) -> "Notice":
        return cls("success", message)

    @classmethod
    def error(cls, message: str) -> "Notice":
        return cls("error", message)


@dataclass(frozen=True)
class ExportResult:
    artifact: ExportArtifact | None
    notice: Notice


def validate_new_order(name: str, order_date: str) -> None:
    if not name or not name.strip():
        raise ValidationError(MSG_NAME_REQUIRED)
    if not order_date or not order_date.strip():
        raise ValidationError(MSG_DATE_REQUIRED)


def _orders_from_snapshot(snapshot: Snapshot) -> list[Order]:
    orders: list[Order] = []
    for doc_id, data in snapshot:
        try:
            orders.append(Order.from_record(doc_id, data))
        except ValueError:
            _logger.warning("Skipping malformed order %s: %r", doc_id, data)
    return orders


class OrderLedger:
    def __init__(
        self,
        store: DocumentStore,
        user: User,
        *,
        font_loader: FontLoader | None = None,
        summary_guard: SummaryGuard | None = None,
        params: ViewParams | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._user = user
        self._font_loader = font_loader
        self._summary_guard = summary_guard or SummaryGuard()
        self._clock = clock
        self._unsubscribe: Unsubscribe | None = None
        self.pipeline = ProjectionPipeline(params)
        self.selection = SelectionTracker()

    @property
    def user(self) -> User:
        return self._user

    def can(self, capability: Capability) -> bool:
        return can(self._user, capability)

    # -- live data -----------------------------------------------------

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(ORDERS_COLLECTION, self._on_snapshot)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_snapshot(self, snapshot: Snapshot) -> None:
        self.pipeline.publish(_orders_from_snapshot(snapshot))
        self.selection.reconcile(self.pipeline.live_ids)

    # -- view ----------------------------------------------------------

    @property
    def params(self) -> ViewParams:
        return self.pipeline.params

    def set_params(self, params: ViewParams) -> None:
        self.pipeline.set_params(params)

    def clear_filters(self) -> None:
        self.pipeline.set_params(ViewParams())

    @property
    def projection(self) -> Projection:
        return self.pipeline.projection

    @property
    def selected_count(self) -> int:
        return self.selection.count(self.pipeline.live_ids)

    def is_all_visible_selected(self, order_type: OrderType) -> bool:
        return self.selection.is_all_visible_selected(self.projection.visible_ids(order_type))

    def toggle_selection(self, order_id: str) -> None:
        require(self._user, Capability.SELECT_ORDERS)
        self.selection.toggle(order_id)

    def select_all_visible(self, order_type: OrderType) -> None:
        require(self._user, Capability.SELECT_ORDERS)
        self.selection.select_all_visible(self.projection.visible_ids(order_type))

    # -- mutations -----------------------------------------------------

    async def add_order(self, name: str, ref: str | None, order_type: OrderType, order_date: str) -> Notice:
        require(self._user, Capability.ADD_ORDER)
        try:
            validate_new_order(name, order_date)
        except ValidationError as exc:
            return Notice.error(str(exc))

        ref = (ref or "").strip() or None
        record = Order(
            id="",
            name=name.strip(),
            ref=ref,
            date=order_date.strip(),
            type=OrderType(order_type),
            status=OrderStatus.PENDING,
            added_by=self._user.email,
        ).to_record()

        try:
            order_id = await self._store.create(ORDERS_COLLECTION, record)
        except StoreError as exc:
            _logger.error("Adding order failed: %s", exc)
            return Notice.error(MSG_ORDER_ADD_FAILED)
        _logger.info("%s added order %s", self._user.email, order_id)
        return Notice.success(MSG_ORDER_ADDED)

    async def toggle_status(self, order_id: str) -> Notice | None:
        require(self._user, Capability.TOGGLE_STATUS)
        order = self.pipeline.find(order_id)
        if order is None:
            return Notice.error(MSG_ORDER_MISSING)
        try:
            await self._store.update(ORDERS_COLLECTION, order_id, {"status": order.status.toggled().value})
        except StoreError as exc:
            _logger.error("Status update for %s failed: %s", order_id, exc)
            return Notice.error(MSG_STATUS_FAILED)
        return None

    def delete_confirmation_message(self) -> str:
        return (
            f"هل أنت متأكد من رغبتك في حذف {self.selected_count} أوردر(ات)؟ "
            "لا يمكن التراجع عن هذا الإجراء."
        )

    async def delete_selected(self) -> Notice | None:
        """Delete the selected live orders; the selection survives a failure."""

        require(self._user, Capability.DELETE_ORDERS)
        ids = sorted(self.selection.selected_ids(self.pipeline.live_ids))
        if not ids:
            return None
        try:
            await self._store.delete_batch(ORDERS_COLLECTION, ids)
        except StoreError as exc:
            _logger.error("Batch delete of %d order(s) failed: %s", len(ids), exc)
            return Notice.error(MSG_DELETE_FAILED)
        self.selection.clear()
        return Notice.success(MSG_DELETED)

    # -- exports and summary -------------------------------------------

    def export_csv(self) -> ExportResult:
        require(self._user, Capability.EXPORT)
        artifact = export_csv(self.projection, today=self._clock())
        return ExportResult(artifact, Notice.success(MSG_CSV_DONE))

    def export_pdf(self) -> ExportResult:
        require(self._user, Capability.EXPORT)
        projection = self.projection
        if projection.is_empty:
            return ExportResult(None, Notice.error(MSG_NOTHING_TO_EXPORT))
        if self._font_loader is None:
            _logger.error("PDF export requested without a font loader")
            return ExportResult(None, Notice.error(MSG_PDF_FAILED))
        try:
            artifact = export_pdf(projection, font_loader=self._font_loader, today=self._clock())
        except ExportResourceError as exc:
            _logger.error("PDF export failed: %s", exc)
            return ExportResult(None, Notice.error(MSG_PDF_FAILED))
        return ExportResult(artifact, Notice.success(MSG_PDF_DONE))

    @property
    def summary_in_flight(self) -> bool:
        return self._summary_guard.in_flight

    async def request_summary(self) -> str | None:
        """Summarise what the tables currently show; None if one is running."""

        require(self._user, Capability.GENERATE_SUMMARY)
        return await self._summary_guard.request(self.projection.rows)
