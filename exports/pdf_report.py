"""PDF export of the projected orders.

The table is laid out right-to-left: columns run from "added by" on the left
to "type" on the right, body cells are right-aligned and the header row is
centred. Every cell is a wrapping paragraph of text that arabic-reshaper has
joined into contextual letter forms and python-bidi has put in visual order.
Rendering Arabic needs a TTF font that is not bundled, so it is read from a
configured path or downloaded on demand.
"""

from __future__ import annotations

import urllib.error
import urllib.request
from datetime import date
from io import BytesIO
from pathlib import Path
from typing import Callable, Final
from xml.sax.saxutils import escape

import arabic_reshaper
from bidi.algorithm import get_display
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.platypus.doctemplate import LayoutError

from config import Settings
from core.formatting import MISSING_REF, format_iso_date, status_label, type_label
from core.logging_setup import get_logger
from core.models import Projection
from exports.common import ExportArtifact, report_filename

__all__ = [
    "PDF_HEADERS",
    "PDF_TITLE",
    "ExportResourceError",
    "build_pdf_rows",
    "build_pdf_table",
    "download_font",
    "export_pdf",
    "load_font_bytes",
    "render_pdf",
    "shape_text",
    "wrap_visual_lines",
]

PDF_TITLE: Final[str] = "تقرير الأوردرات"
PDF_HEADERS: Final[tuple[str, ...]] = (
    "أضيف بواسطة",
    "الحالة",
    "التاريخ",
    "الرقم المرجعي",
    "الاسم",
    "النوع",
)
FONT_NAME: Final[str] = "Amiri"
HEADER_FILL = colors.Color(22 / 255, 160 / 255, 133 / 255)
# Millimetres, in PDF_HEADERS order; they fill the A4 width inside the margins.
COLUMN_WIDTHS_MM: Final[tuple[int, ...]] = (42, 22, 24, 28, 50, 20)
MAX_CELL_CHARS: Final[int] = 400
CELL_PADDING: Final[float] = 4.0

FontLoader = Callable[[], bytes]

_logger = get_logger("order_tracker.pdf")


class ExportResourceError(RuntimeError):
    """Raised when the font needed for the PDF cannot be obtained."""


def download_font(url: str, *, timeout: float = 20.0) -> bytes:
    try:
        with urllib.request.urlopen(url, timeout=timeout) as resp:
            data = resp.read()
    except (urllib.error.URLError, TimeoutError, OSError) as exc:
        raise ExportResourceError(f"Failed to download font from {url}: {exc}") from exc
    if not data:
        raise ExportResourceError(f"Font download from {url} returned no data")
    return data


def load_font_bytes(settings: Settings) -> bytes:
    """Read the configured local font, falling back to downloading it."""

    path: Path | None = settings.pdf_font_path
    if path is not None:
        try:
            return Path(path).read_bytes()
        except OSError as exc:
            _logger.warning("Font file %s unreadable (%s); downloading instead", path, exc)
    return download_font(settings.pdf_font_url, timeout=settings.pdf_font_timeout)


def build_pdf_rows(projection: Projection) -> list[list[str]]:
    return [
        [
            order.added_by,
            status_label(order.status),
            format_iso_date(order.date),
            order.ref or MISSING_REF,
            order.name,
            type_label(order.type),
        ]
        for order in projection.rows
    ]


def shape_text(text: str) -> str:
    """Join Arabic letters into their contextual forms and lay them out in
    visual (left-to-right) order, which is what reportlab draws."""

    return get_display(arabic_reshaper.reshape(text))


def _clip(text: str) -> str:
    if len(text) > MAX_CELL_CHARS:
        return text[: MAX_CELL_CHARS - 1] + "…"
    return text


def wrap_visual_lines(text: str, font_name: str, font_size: float, max_width: float) -> list[str]:
    """Break shaped text into lines that fit ``max_width`` points.

    Lines are broken in logical order and only then reordered for display,
    so wrapped right-to-left text still reads top to bottom.
    """

    lines: list[str] = []
    current = ""
    for word in arabic_reshaper.reshape(_clip(text)).split():
        candidate = f"{current} {word}" if current else word
        if current and pdfmetrics.stringWidth(candidate, font_name, font_size) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return [get_display(line) for line in lines]


def _paragraph(text: str, style: ParagraphStyle, width: float) -> Paragraph:
    lines = wrap_visual_lines(text, style.fontName, style.fontSize, width - 2 * CELL_PADDING)
    return Paragraph("<br/>".join(escape(line) for line in lines), style)


def _register_font(font_bytes: bytes) -> str:
    try:
        pdfmetrics.registerFont(TTFont(FONT_NAME, BytesIO(font_bytes)))
    except Exception as exc:  # reportlab raises bare TTFError/struct errors on bad data
        raise ExportResourceError(f"Font data could not be loaded: {exc}") from exc
    return FONT_NAME


def build_pdf_table(projection: Projection, font_name: str) -> Table:
    """Header and body cells as paragraphs of pre-wrapped, shaped lines."""

    header_style = ParagraphStyle(
        name="ReportHeader",
        fontName=font_name,
        fontSize=9,
        leading=12,
        alignment=TA_CENTER,
        textColor=colors.white,
    )
    cell_style = ParagraphStyle(name="ReportCell", fontName=font_name, fontSize=9, leading=12, alignment=TA_RIGHT)

    widths = [width * mm for width in COLUMN_WIDTHS_MM]
    data = [[_paragraph(label, header_style, width) for label, width in zip(PDF_HEADERS, widths)]]
    data.extend(
        [_paragraph(value, cell_style, width) for value, width in zip(row, widths)]
        for row in build_pdf_rows(projection)
    )

    table = Table(data, colWidths=widths, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("LEFTPADDING", (0, 0), (-1, -1), CELL_PADDING),
                ("RIGHTPADDING", (0, 0), (-1, -1), CELL_PADDING),
            ]
        )
    )
    return table


def render_pdf(projection: Projection, font_bytes: bytes) -> bytes:
    font_name = _register_font(font_bytes)

    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=PDF_TITLE,
    )
    title_style = ParagraphStyle(name="ReportTitle", fontName=font_name, fontSize=20, leading=26, alignment=TA_CENTER)

    story = [
        Paragraph(escape(shape_text(PDF_TITLE)), title_style),
        Spacer(1, 6 * mm),
        build_pdf_table(projection, font_name),
    ]
    try:
        doc.build(story)
    except LayoutError as exc:
        raise ExportResourceError(f"PDF layout failed: {exc}") from exc
    return buf.getvalue()


def export_pdf(
    projection: Projection,
    *,
    font_loader: FontLoader,
    today: date | None = None,
) -> ExportArtifact:
    """Build the PDF artifact; raises ``ExportResourceError`` on font failure.

    Callers must not pass an empty projection.
    """

    if projection.is_empty:
        raise ValueError("Cannot export an empty projection")
    font_bytes = font_loader()
    return ExportArtifact(
        filename=report_filename("pdf", today),
        content=render_pdf(projection, font_bytes),
        mime_type="application/pdf",
    )
