"""Formatting helpers for order tables, exports and summaries."""

from __future__ import annotations

from datetime import date
from typing import Final

import pandas as pd

from core.models import OrderStatus, OrderType, UserRole

__all__ = [
    "MISSING_REF",
    "format_iso_date",
    "format_localized_date",
    "parse_order_date",
    "role_label",
    "status_label",
    "to_arabic_numerals",
    "type_label",
]

MISSING_REF: Final[str] = "N/A"

_ARABIC_DIGITS = str.maketrans("0123456789", "٠١٢٣٤٥٦٧٨٩")
_RLM = "\u200f"

_TYPE_LABELS: Final[dict[OrderType, str]] = {
    OrderType.INCOME: "استلام",
    OrderType.EXPENSE: "صرف",
}
_STATUS_LABELS: Final[dict[OrderStatus, str]] = {
    OrderStatus.PENDING: "قيد الانتظار",
    OrderStatus.COMPLETED: "مكتمل",
}
_ROLE_LABELS: Final[dict[UserRole, str]] = {
    UserRole.ADMIN: "أدمن",
    UserRole.GUEST: "ضيف",
}


def type_label(order_type: OrderType) -> str:
    return _TYPE_LABELS[order_type]


def status_label(status: OrderStatus) -> str:
    return _STATUS_LABELS[status]


def role_label(role: UserRole) -> str:
    return _ROLE_LABELS[role]


def to_arabic_numerals(value: object) -> str:
    """Replace western digits with Arabic-Indic digits."""

    if value is None:
        return ""
    return str(value).translate(_ARABIC_DIGITS)


def parse_order_date(value: object) -> pd.Timestamp | None:
    """Parse an ISO date or timestamp; ``None`` when it cannot be read.

    Timezone-aware values are converted to naive UTC so every parsed value is
    comparable with every other.
    """

    if not isinstance(value, (str, date)) or value == "":
        return None
    try:
        timestamp = pd.Timestamp(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if pd.isna(timestamp):
        return None
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert("UTC").tz_localize(None)
    return timestamp


def format_iso_date(value: str) -> str:
    """Render as ``YYYY-MM-DD``; unparseable values are returned unchanged."""

    timestamp = parse_order_date(value)
    if timestamp is None:
        return value
    return timestamp.strftime("%Y-%m-%d")


def format_localized_date(value: str) -> str:
    """Render an Egyptian Arabic short date: day, month, year joined by RLM and ``/``."""

    timestamp = parse_order_date(value)
    if timestamp is None:
        return value
    text = f"{timestamp.day}{_RLM}/{timestamp.month}{_RLM}/{timestamp.year}"
    return to_arabic_numerals(text)
