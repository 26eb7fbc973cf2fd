"""Tests for the CSV and PDF exports."""

from __future__ import annotations

import csv
import io
from datetime import date
from pathlib import Path

import pytest
import reportlab
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from config import Settings
from core.models import OrderStatus, OrderType, ViewParams
from core.projection import project
from exports.common import report_filename
from exports.csv_report import CSV_HEADERS, export_csv, render_csv
from exports.pdf_report import (
    PDF_HEADERS,
    ExportResourceError,
    build_pdf_rows,
    export_pdf,
    load_font_bytes,
    render_pdf,
    shape_text,
    wrap_visual_lines,
)

VERA_TTF = Path(reportlab.__file__).resolve().parent / "fonts" / "Vera.ttf"


def _read_rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text.lstrip("\ufeff"), newline="")))


def test_csv_has_bom_header_and_crlf_lines(make_order):
    projection = project([make_order("a", name="Cement", date="2024-03-15")], ViewParams())

    text = render_csv(projection)

    assert text.startswith("\ufeff")
    assert text.count("\r\n") == 2
    rows = _read_rows(text)
    assert tuple(rows[0]) == CSV_HEADERS


def test_csv_row_uses_arabic_labels_and_localized_date(make_order):
    order = make_order(
        "a",
        name="Cement",
        ref="INV-7",
        date="2024-03-15",
        type=OrderType.INCOME,
        status=OrderStatus.COMPLETED,
        added_by="boss@example.com",
    )

    rows = _read_rows(render_csv(project([order], ViewParams())))

    assert rows[1] == ["استلام", "Cement", "INV-7", "١٥\u200f/٣\u200f/٢٠٢٤", "مكتمل", "boss@example.com"]


def test_csv_quotes_commas_and_quotes(make_order):
    tricky = 'Acme, "North" branch'
    projection = project([make_order("a", name=tricky)], ViewParams())

    text = render_csv(projection)

    assert '"Acme, ""North"" branch"' in text
    assert _read_rows(text)[1][1] == tricky


def test_csv_missing_ref_is_blank(make_order):
    rows = _read_rows(render_csv(project([make_order("a")], ViewParams())))

    assert rows[1][2] == ""


def test_csv_follows_projection_order(five_orders):
    projection = project(five_orders, ViewParams())

    names = [row[1] for row in _read_rows(render_csv(projection))[1:]]

    assert names == [order.name for order in projection.rows]


def test_export_csv_artifact(make_order):
    artifact = export_csv(project([make_order("a")], ViewParams()), today=date(2024, 5, 1))

    assert artifact.filename == "تقرير_الأوردرات_2024-05-01.csv"
    assert artifact.mime_type.startswith("text/csv")
    assert artifact.content.startswith("\ufeff".encode("utf-8"))


def test_report_filename_defaults_to_today():
    assert report_filename("pdf").endswith(f"_{date.today().isoformat()}.pdf")


def test_pdf_rows_run_right_to_left(make_order):
    order = make_order("a", name="Cement", date="2024-03-15T10:30:00", type=OrderType.EXPENSE)

    rows = build_pdf_rows(project([order], ViewParams()))

    assert PDF_HEADERS[0] == "أضيف بواسطة"
    assert PDF_HEADERS[-1] == "النوع"
    assert rows == [["boss@example.com", "قيد الانتظار", "2024-03-15", "N/A", "Cement", "صرف"]]


def test_render_pdf_produces_document(five_orders):
    content = render_pdf(project(five_orders, ViewParams()), VERA_TTF.read_bytes())

    assert content.startswith(b"%PDF")


def test_render_pdf_rejects_bad_font(five_orders):
    with pytest.raises(ExportResourceError):
        render_pdf(project(five_orders, ViewParams()), b"not a font")


def test_export_pdf_refuses_empty_projection():
    calls = []

    with pytest.raises(ValueError):
        export_pdf(project([], ViewParams()), font_loader=lambda: calls.append(1) or b"")

    assert calls == []


def test_export_pdf_artifact(five_orders):
    artifact = export_pdf(
        project(five_orders, ViewParams()),
        font_loader=VERA_TTF.read_bytes,
        today=date(2024, 5, 1),
    )

    assert artifact.filename == "تقرير_الأوردرات_2024-05-01.pdf"
    assert artifact.mime_type == "application/pdf"
    assert artifact.content.startswith(b"%PDF")


def test_load_font_bytes_prefers_local_file():
    settings = Settings(pdf_font_path=VERA_TTF, pdf_font_url="http://invalid.example/font.ttf")

    assert load_font_bytes(settings) == VERA_TTF.read_bytes()


def test_arabic_headers_are_shaped_for_drawing():
    shaped = shape_text(PDF_HEADERS[-1])

    assert shaped != PDF_HEADERS[-1]
    assert all("\ufe70" <= ch <= "\ufeff" for ch in shaped)
    assert len(shaped) == len(PDF_HEADERS[-1])


def test_latin_text_is_left_as_is():
    assert shape_text("INV-7") == "INV-7"
    assert shape_text("boss@example.com") == "boss@example.com"


def test_long_names_wrap_inside_the_page(make_order):
    order = make_order("a", name="Word " * 600, ref="<b>&")

    content = render_pdf(project([order], ViewParams()), VERA_TTF.read_bytes())

    assert content.startswith(b"%PDF")


def test_wrapped_arabic_lines_keep_reading_order():
    pdfmetrics.registerFont(TTFont("VeraWrap", str(VERA_TTF)))
    words = ["واحد", "اثنان", "ثلاثة", "أربعة"]

    lines = wrap_visual_lines(" ".join(words), "VeraWrap", 9, max_width=1)

    assert lines == [shape_text(word) for word in words]


def test_wrapping_packs_words_up_to_the_width():
    pdfmetrics.registerFont(TTFont("VeraWrap", str(VERA_TTF)))
    width = pdfmetrics.stringWidth("aa bb", "VeraWrap", 9)

    assert wrap_visual_lines("aa bb cc dd e", "VeraWrap", 9, width) == ["aa bb", "cc dd", "e"]
