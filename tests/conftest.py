"""Shared fixtures for the order tracker tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import streamlit as st

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import get_settings  # noqa: E402
from core.models import Order, OrderStatus, OrderType, User, UserRole  # noqa: E402

SUPER_ADMIN = "boss@example.com"


@pytest.fixture(autouse=True)
def clear_streamlit_secrets(monkeypatch):
    """Provide an empty secrets mapping so tests don't rely on Streamlit runtime."""

    monkeypatch.setattr(st, "secrets", {}, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def make_order():
    def _make(
        order_id: str,
        *,
        name: str | None = None,
        ref: str | None = None,
        date: str = "2024-03-01",
        type: OrderType = OrderType.EXPENSE,
        status: OrderStatus = OrderStatus.PENDING,
        added_by: str = SUPER_ADMIN,
    ) -> Order:
        return Order(
            id=order_id,
            name=name if name is not None else f"Order {order_id}",
            ref=ref,
            date=date,
            type=type,
            status=status,
            added_by=added_by,
        )

    return _make


@pytest.fixture()
def admin_user() -> User:
    return User(id="u-admin", email=SUPER_ADMIN, role=UserRole.ADMIN)


@pytest.fixture()
def guest_user() -> User:
    return User(id="u-guest", email="guest@example.com", role=UserRole.GUEST)


@pytest.fixture()
def five_orders(make_order) -> list[Order]:
    return [
        make_order("e1", name="Cement", date="2024-03-02", type=OrderType.EXPENSE, status=OrderStatus.PENDING),
        make_order("e2", name="Steel", date="2024-03-09", type=OrderType.EXPENSE, status=OrderStatus.COMPLETED),
        make_order("e3", name="Paint", date="2024-03-05", type=OrderType.EXPENSE, status=OrderStatus.PENDING),
        make_order("i1", name="Client A", date="2024-02-20", type=OrderType.INCOME, status=OrderStatus.PENDING),
        make_order("i2", name="Client B", date="2024-03-11", type=OrderType.INCOME, status=OrderStatus.PENDING),
    ]
