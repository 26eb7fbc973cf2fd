"""Process-wide resources and per-session objects for the Streamlit app."""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine, TypeVar

import streamlit as st

from config import get_settings
from core import OrderLedger, User
from core.auth import AuthService, LocalAuthProvider
from core.data_loader import load_seed_orders
from core.logging_setup import get_logger
from core.store import ORDERS_COLLECTION, InMemoryDocumentStore
from exports.pdf_report import load_font_bytes

T = TypeVar("T")

_logger = get_logger("order_tracker.app")


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(coro)


@st.cache_resource(show_spinner=False)
def get_store() -> InMemoryDocumentStore:
    """Shared order store, seeded from the configured CSV when present."""

    settings = get_settings()
    initial = {}
    if settings.seed_path is not None and settings.seed_path.exists():
        initial[ORDERS_COLLECTION] = load_seed_orders(settings.seed_path)
        _logger.info("Seeded %d order(s) from %s", len(initial[ORDERS_COLLECTION]), settings.seed_path)
    return InMemoryDocumentStore(initial)


@st.cache_resource(show_spinner=False)
def get_account_registry() -> dict:
    return {}


@st.cache_resource(show_spinner=False)
def _font_bytes() -> bytes:
    return load_font_bytes(get_settings())


def get_auth_service() -> AuthService:
    """One auth service per browser session; accounts are shared."""

    if "auth_service" not in st.session_state:
        provider = LocalAuthProvider(accounts=get_account_registry())
        st.session_state["auth_service"] = AuthService(
            provider,
            get_store(),
            super_admin_email=get_settings().super_admin_email,
        )
    return st.session_state["auth_service"]


def current_user(auth: AuthService) -> User | None:
    uid = auth.current_uid
    if uid is None:
        return None
    return run_async(auth.get_user(uid))


def get_ledger(user: User) -> OrderLedger:
    """Return the session ledger for ``user``, replacing one for another user."""

    ledger: OrderLedger | None = st.session_state.get("ledger")
    if ledger is not None and ledger.user == user:
        return ledger
    if ledger is not None:
        ledger.stop()

    ledger = OrderLedger(get_store(), user, font_loader=_font_bytes)
    ledger.start()
    st.session_state["ledger"] = ledger
    return ledger


def drop_ledger() -> None:
    ledger: OrderLedger | None = st.session_state.pop("ledger", None)
    if ledger is not None:
        ledger.stop()
