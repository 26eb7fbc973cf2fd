"""Shared data model definitions for the order tracker."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class OrderType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class OrderStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"

    def toggled(self) -> "OrderStatus":
        if self is OrderStatus.PENDING:
            return OrderStatus.COMPLETED
        return OrderStatus.PENDING


class UserRole(str, Enum):
    ADMIN = "admin"
    GUEST = "guest"


class SortOption(str, Enum):
    DATE_DESC = "date-desc"
    DATE_ASC = "date-asc"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    REF_ASC = "ref-asc"
    REF_DESC = "ref-desc"

    @classmethod
    def coerce(cls, value: "SortOption | str | None") -> "SortOption":
        """Return the matching option, defaulting to newest-first."""

        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.DATE_DESC

    @property
    def descending(self) -> bool:
        return self.value.endswith("-desc")


@dataclass(frozen=True, slots=True)
class Order:
    id: str
    name: str
    date: str
    type: OrderType
    status: OrderStatus
    added_by: str
    ref: str | None = None

    @classmethod
    def from_record(cls, order_id: str, data: Mapping[str, Any]) -> "Order":
        """Build an order from a store document.

        Raises ``ValueError`` when ``type`` or ``status`` is not a known value.
        """

        ref = data.get("ref")
        return cls(
            id=str(order_id),
            name=str(data.get("name", "")),
            date=str(data.get("date", "")),
            type=OrderType(data.get("type")),
            status=OrderStatus(data.get("status")),
            added_by=str(data.get("addedBy", "")),
            ref=None if ref is None else str(ref),
        )

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "name": self.name,
            "date": self.date,
            "type": self.type.value,
            "status": self.status.value,
            "addedBy": self.added_by,
        }
        if self.ref is not None:
            record["ref"] = self.ref
        return record


@dataclass(frozen=True, slots=True)
class User:
    id: str
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


@dataclass(frozen=True)
class ViewParams:
    """User-controlled filter and sort parameters for one projection."""

    search_term: str = ""
    date_filter: str = ""
    status_filter: OrderStatus | None = None
    sort_option: SortOption = SortOption.DATE_DESC

    @classmethod
    def from_inputs(
        cls,
        search_term: str | None = "",
        date_filter: str | None = "",
        status_filter: OrderStatus | str | None = None,
        sort_option: SortOption | str | None = None,
    ) -> "ViewParams":
        """Coerce raw widget values into parameters.

        An empty status means no status filter; an unknown sort option falls
        back to ``date-desc``.
        """

        status: OrderStatus | None
        if isinstance(status_filter, OrderStatus):
            status = status_filter
        elif status_filter:
            try:
                status = OrderStatus(status_filter)
            except ValueError:
                status = None
        else:
            status = None

        return cls(
            search_term=search_term or "",
            date_filter=date_filter or "",
            status_filter=status,
            sort_option=SortOption.coerce(sort_option),
        )


@dataclass(frozen=True)
class Projection:
    """Filtered, sorted and type-partitioned view of the live orders."""

    rows: tuple[Order, ...] = ()
    income: tuple[Order, ...] = ()
    expense: tuple[Order, ...] = ()
    params: ViewParams = field(default_factory=ViewParams)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def orders_of(self, order_type: OrderType) -> tuple[Order, ...]:
        return self.income if order_type is OrderType.INCOME else self.expense

    def visible_ids(self, order_type: OrderType | None = None) -> list[str]:
        source = self.rows if order_type is None else self.orders_of(order_type)
        return [order.id for order in source]


__all__ = [
    "Order",
    "OrderStatus",
    "OrderType",
    "Projection",
    "SortOption",
    "User",
    "UserRole",
    "ViewParams",
]
