"""CSV and PDF exports built from the current order projection."""

import core  # noqa: F401  # load core first: core.ledger imports this package
from .common import ExportArtifact, report_filename
from .csv_report import CSV_HEADERS, build_csv_frame, export_csv, render_csv
from .pdf_report import PDF_HEADERS, ExportResourceError, build_pdf_rows, export_pdf, load_font_bytes, render_pdf

__all__ = [
    "CSV_HEADERS",
    "PDF_HEADERS",
    "ExportArtifact",
    "ExportResourceError",
    "build_csv_frame",
    "build_pdf_rows",
    "export_csv",
    "export_pdf",
    "load_font_bytes",
    "render_csv",
    "render_pdf",
    "report_filename",
]
