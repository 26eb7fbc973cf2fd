"""Locale-aware ordering keys for order names and reference codes."""

from __future__ import annotations

import re
import unicodedata
from functools import lru_cache
from typing import Tuple

from pyuca import Collator

__all__ = [
    "RefKey",
    "get_collator",
    "ref_sort_key",
    "text_sort_key",
]

_DIGIT_RUN = re.compile(r"(\d+)")

# (kind, digit count, ascii digits, collation key); digit runs use kind 0 so
# they sort ahead of text runs. Comparing by length then digits keeps runs of
# any size exact without converting them to int.
RefPart = Tuple[int, int, str, Tuple[int, ...]]
RefKey = Tuple[RefPart, ...]


@lru_cache(maxsize=1)
def get_collator() -> Collator:
    """Return the shared UCA collator; loading the table is slow."""

    return Collator()


@lru_cache(maxsize=4096)
def text_sort_key(value: str) -> Tuple[int, ...]:
    return get_collator().sort_key(value or "")


def _digit_part(chunk: str) -> RefPart:
    digits = "".join(str(unicodedata.decimal(ch)) for ch in chunk).lstrip("0")
    return (0, len(digits), digits, ())


@lru_cache(maxsize=4096)
def ref_sort_key(value: str | None) -> RefKey:
    """Numeric-aware key: ``"2"`` sorts before ``"10"``, ``None`` before all."""

    if not value:
        return ()

    parts: list[RefPart] = []
    for chunk in _DIGIT_RUN.split(value):
        if not chunk:
            continue
        if chunk.isdecimal():
            parts.append(_digit_part(chunk))
        else:
            parts.append((1, 0, "", text_sort_key(chunk)))
    return tuple(parts)
