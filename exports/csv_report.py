"""CSV export of the projected orders."""

from __future__ import annotations

from datetime import date
from typing import Final

import pandas as pd

from core.formatting import format_localized_date, status_label, type_label
from core.models import Projection
from exports.common import ExportArtifact, report_filename

__all__ = ["CSV_HEADERS", "build_csv_frame", "export_csv", "render_csv"]

CSV_HEADERS: Final[tuple[str, ...]] = (
    "النوع",
    "الاسم",
    "الرقم المرجعي",
    "التاريخ",
    "الحالة",
    "أضيف بواسطة",
)
_BOM: Final[str] = "\ufeff"


def build_csv_frame(projection: Projection) -> pd.DataFrame:
    """One row per projected order, in projection order."""

    records = [
        (
            type_label(order.type),
            order.name,
            order.ref or "",
            format_localized_date(order.date),
            status_label(order.status),
            order.added_by,
        )
        for order in projection.rows
    ]
    return pd.DataFrame.from_records(records, columns=list(CSV_HEADERS))


def render_csv(projection: Projection) -> str:
    """Comma separated, CRLF terminated, minimal quoting, BOM prefixed."""

    frame = build_csv_frame(projection)
    body = frame.to_csv(index=False, lineterminator="\r\n")
    return _BOM + body


def export_csv(projection: Projection, *, today: date | None = None) -> ExportArtifact:
    return ExportArtifact(
        filename=report_filename("csv", today),
        content=render_csv(projection).encode("utf-8"),
        mime_type="text/csv;charset=utf-8",
    )
