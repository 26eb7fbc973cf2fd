"""Seed data loading for the local order store."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final

import pandas as pd

from core.logging_setup import get_logger
from core.models import OrderStatus, OrderType

__all__ = ["SEED_COLUMNS", "load_seed_orders"]

SEED_COLUMNS: Final[tuple[str, ...]] = ("id", "name", "ref", "date", "type", "status", "addedBy")

_logger = get_logger("order_tracker.data_loader")


def load_seed_orders(csv_path: str | Path) -> dict[str, dict[str, Any]]:
    """Return order documents keyed by id from a seed CSV.

    Rows with an unknown type or status are dropped; an empty ``ref`` cell
    means the order has no reference.
    """

    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = [column for column in SEED_COLUMNS if column not in df.columns]
    if missing:
        raise ValueError(f"Seed CSV is missing columns: {', '.join(missing)}")

    valid_types = {member.value for member in OrderType}
    valid_statuses = {member.value for member in OrderStatus}
    mask = df["type"].isin(valid_types) & df["status"].isin(valid_statuses) & (df["name"].str.strip() != "")
    if (~mask).any():
        _logger.warning("Dropping %d invalid seed row(s) from %s", int((~mask).sum()), path)
    df = df[mask]

    documents: dict[str, dict[str, Any]] = {}
    for row in df.to_dict(orient="records"):
        record = {key: row[key] for key in SEED_COLUMNS if key not in ("id", "ref")}
        if row["ref"]:
            record["ref"] = row["ref"]
        documents[row["id"]] = record
    return documents
