"""Order tracker Streamlit entrypoint."""

from __future__ import annotations

import streamlit as st

from app.layout import flush_notice, inject_css, render_header
from app.pages import render_admin_page, render_auth_page, render_ledger_page
from app.state import current_user, drop_ledger, get_auth_service, get_ledger
from config import get_settings
from core import Notice
from core.logging_setup import configure_logging
from core.permissions import Capability

MSG_LOGGED_OUT = "تم تسجيل الخروج بنجاح."


def _render_toolbar(auth, ledger) -> None:
    cols = st.columns((6, 1, 1))
    if ledger.can(Capability.VIEW_USERS):
        show_admin = st.session_state.get("show_admin", False)
        if cols[1].button("إغلاق الصلاحيات" if show_admin else "إدارة الصلاحيات"):
            st.session_state["show_admin"] = not show_admin
            st.rerun()
    if cols[2].button("تسجيل الخروج", type="primary"):
        auth.logout()
        drop_ledger()
        st.session_state["pending_notice"] = Notice.success(MSG_LOGGED_OUT)
        st.rerun()


def main() -> None:
    """Application entrypoint for the order tracker."""

    st.set_page_config(
        page_title="متتبع الأوردرات",
        page_icon="📦",
        layout="wide",
        initial_sidebar_state="collapsed",
    )
    configure_logging(get_settings().log_level)
    inject_css()

    auth = get_auth_service()
    user = current_user(auth)
    flush_notice()

    if user is None:
        drop_ledger()
        render_auth_page(auth)
        return

    ledger = get_ledger(user)
    render_header(user)
    _render_toolbar(auth, ledger)

    if st.session_state.get("show_admin") and ledger.can(Capability.VIEW_USERS):
        render_admin_page(auth, user)

    render_ledger_page(ledger)


if __name__ == "__main__":
    main()
