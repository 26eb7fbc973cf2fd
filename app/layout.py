"""Shared layout primitives for the order tracker Streamlit app."""

from __future__ import annotations

from contextlib import contextmanager

import streamlit as st

from core import Notice, User
from core.formatting import role_label


def inject_css() -> None:
    """Inject right-to-left layout and card styling."""

    st.markdown(
        """
        <style>
          :root {
            --radius: 12px;
            --card-bg: #FFFFFF;
            --border: #E6EAF2;
            --shadow: 0 1px 2px rgba(16, 24, 40, 0.05), 0 1px 3px rgba(16, 24, 40, 0.06);
          }

          body, [data-testid="stAppViewContainer"] > .main {
            background: #F4F6FB;
            direction: rtl;
          }

          [data-testid="stMarkdownContainer"], [data-testid="stWidgetLabel"] {
            direction: rtl;
            text-align: right;
          }

          .block-container {
            max-width: 1200px;
            padding-top: 2rem;
            padding-bottom: 4rem;
          }

          .ot-header {
            display: flex;
            align-items: center;
            justify-content: space-between;
            padding: 0.75rem 0;
          }

          .ot-header__brand {
            font-size: 1.5rem;
            font-weight: 700;
            color: #111827;
          }

          .ot-chip {
            display: inline-block;
            padding: 0.1rem 0.6rem;
            border-radius: 999px;
            font-size: 0.75rem;
            font-weight: 700;
            color: #FFFFFF;
            background: #6B7280;
          }

          .ot-chip.is-admin {
            background: #3B82F6;
          }

          .ot-card__title {
            font-size: 1.15rem;
            font-weight: 700;
            margin-bottom: 0.5rem;
          }

          .ot-status {
            padding: 0.15rem 0.7rem;
            border-radius: 999px;
            font-size: 0.8rem;
            font-weight: 600;
          }

          .ot-status.is-pending {
            background: #FEF08A;
            color: #854D0E;
          }

          .ot-status.is-completed {
            background: #BBF7D0;
            color: #166534;
          }
        </style>
        """,
        unsafe_allow_html=True,
    )


@contextmanager
def card(title: str):
    """Render content inside a bordered card with a title."""

    with st.container(border=True):
        st.markdown(f'<div class="ot-card__title">{title}</div>', unsafe_allow_html=True)
        yield


def render_header(user: User) -> None:
    chip_class = "ot-chip is-admin" if user.is_admin else "ot-chip"
    st.markdown(
        f"""
        <div class="ot-header">
            <div class="ot-header__brand">متتبع الأوردرات</div>
            <div>{user.email} <span class="{chip_class}">{role_label(user.role)}</span></div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def show_notice(notice: Notice | None) -> None:
    if notice is None:
        return
    if notice.level == "success":
        st.toast(notice.message, icon="✅")
    else:
        st.error(notice.message)


def queue_notice(notice: Notice | None) -> None:
    """Keep a notice across the rerun triggered by a widget callback."""

    if notice is not None:
        st.session_state["pending_notice"] = notice


def flush_notice() -> None:
    show_notice(st.session_state.pop("pending_notice", None))


__all__ = [
    "card",
    "flush_notice",
    "inject_css",
    "queue_notice",
    "render_header",
    "show_notice",
]
