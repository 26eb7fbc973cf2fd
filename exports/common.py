"""Shared pieces of the CSV and PDF exports."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Final

__all__ = ["REPORT_BASENAME", "ExportArtifact", "report_filename"]

REPORT_BASENAME: Final[str] = "تقرير_الأوردرات"


@dataclass(frozen=True, slots=True)
class ExportArtifact:
    filename: str
    content: bytes
    mime_type: str


def report_filename(extension: str, today: date | None = None) -> str:
    day = today or date.today()
    return f"{REPORT_BASENAME}_{day.isoformat()}.{extension}"
