"""Order ledger page: entry form, filters, exports, summary and tables."""

from __future__ import annotations

from datetime import date

import streamlit as st

from app.layout import card, queue_notice, show_notice
from app.state import run_async
from core import Order, OrderLedger, OrderStatus, OrderType, SortOption, ViewParams
from core.formatting import (
    MISSING_REF,
    format_localized_date,
    status_label,
    to_arabic_numerals,
)
from core.permissions import Capability

SORT_LABELS: dict[SortOption, str] = {
    SortOption.DATE_DESC: "التاريخ (الأحدث أولاً)",
    SortOption.DATE_ASC: "التاريخ (الأقدم أولاً)",
    SortOption.NAME_ASC: "الاسم (أ - ي)",
    SortOption.NAME_DESC: "الاسم (ي - أ)",
    SortOption.REF_ASC: "الرقم المرجعي (تصاعدي)",
    SortOption.REF_DESC: "الرقم المرجعي (تنازلي)",
}
STATUS_CHOICES: list[str] = ["", OrderStatus.PENDING.value, OrderStatus.COMPLETED.value]

_FILTER_KEYS = ("filter_search", "filter_date", "filter_status", "filter_sort")


def _read_params() -> ViewParams:
    return ViewParams.from_inputs(
        search_term=st.session_state.get("filter_search", ""),
        date_filter=st.session_state.get("filter_date", ""),
        status_filter=st.session_state.get("filter_status", ""),
        sort_option=st.session_state.get("filter_sort", SortOption.DATE_DESC.value),
    )


def _clear_filters(ledger: OrderLedger) -> None:
    for key in _FILTER_KEYS:
        st.session_state.pop(key, None)
    ledger.clear_filters()


def _render_add_form(ledger: OrderLedger) -> None:
    with card("إضافة أوردر جديد"):
        with st.form("add-order", clear_on_submit=True):
            cols = st.columns((2, 1, 1))
            name = cols[0].text_input("الاسم (العميل/المورد)")
            ref = cols[1].text_input("الرقم المرجعي (اختياري)")
            order_date = cols[2].date_input("تاريخ الأوردر", value=date.today())
            buttons = st.columns(2)
            as_expense = buttons[0].form_submit_button("صرف", use_container_width=True)
            as_income = buttons[1].form_submit_button("استلام", use_container_width=True)

        if as_expense or as_income:
            order_type = OrderType.INCOME if as_income else OrderType.EXPENSE
            iso_date = order_date.isoformat() if order_date else ""
            show_notice(run_async(ledger.add_order(name, ref, order_type, iso_date)))


def _render_filters(ledger: OrderLedger) -> None:
    with card("البحث والتصفية"):
        cols = st.columns(4)
        cols[0].text_input("بحث", key="filter_search", placeholder="ابحث بالاسم أو الرقم المرجعي...")
        cols[1].text_input("التاريخ", key="filter_date", placeholder="YYYY-MM-DD")
        cols[2].selectbox(
            "الحالة",
            STATUS_CHOICES,
            key="filter_status",
            format_func=lambda value: status_label(OrderStatus(value)) if value else "كل الحالات",
        )
        cols[3].selectbox(
            "الترتيب",
            [option.value for option in SortOption],
            key="filter_sort",
            format_func=lambda value: SORT_LABELS[SortOption(value)],
        )
        ledger.set_params(_read_params())

        actions = st.columns((1, 1, 1, 2))
        actions[0].button("مسح الفلاتر", on_click=_clear_filters, args=(ledger,))

        if actions[1].button("تصدير CSV"):
            st.session_state["export_result"] = ledger.export_csv()
        if actions[2].button("تصدير PDF"):
            with st.spinner("جاري تحضير ملف PDF..."):
                st.session_state["export_result"] = ledger.export_pdf()

        result = st.session_state.pop("export_result", None)
        if result is not None:
            show_notice(result.notice)
            if result.artifact is not None:
                st.download_button(
                    f"تنزيل {result.artifact.filename}",
                    data=result.artifact.content,
                    file_name=result.artifact.filename,
                    mime=result.artifact.mime_type,
                )

        selected = ledger.selected_count
        if ledger.can(Capability.DELETE_ORDERS) and selected > 0:
            if actions[3].button(f"مسح المحدد ({to_arabic_numerals(selected)})", type="primary"):
                st.session_state["confirm_delete"] = True

    if st.session_state.get("confirm_delete"):
        _render_delete_confirmation(ledger)


def _render_delete_confirmation(ledger: OrderLedger) -> None:
    with card("تأكيد الحذف"):
        st.write(ledger.delete_confirmation_message())
        cols = st.columns(2)
        if cols[0].button("إلغاء"):
            st.session_state["confirm_delete"] = False
            st.rerun()
        if cols[1].button("نعم، احذف", type="primary"):
            notice = run_async(ledger.delete_selected())
            st.session_state["confirm_delete"] = False
            queue_notice(notice)
            st.rerun()


def _render_summary(ledger: OrderLedger) -> None:
    with card("ملخص ذكي"):
        busy = ledger.summary_in_flight
        label = "جاري الإنشاء..." if busy else "إنشاء ملخص باستخدام الذكاء الاصطناعي"
        if st.button(label, disabled=busy):
            with st.spinner("جاري الإنشاء..."):
                summary = run_async(ledger.request_summary())
            if summary is not None:
                st.session_state["summary_text"] = summary
        if st.session_state.get("summary_text"):
            st.info(st.session_state["summary_text"])


def _status_chip(order: Order) -> str:
    css = "is-completed" if order.status is OrderStatus.COMPLETED else "is-pending"
    return f'<span class="ot-status {css}">{status_label(order.status)}</span>'


def _on_toggle_status(ledger: OrderLedger, order_id: str) -> None:
    queue_notice(run_async(ledger.toggle_status(order_id)))


def _render_table(ledger: OrderLedger, title: str, order_type: OrderType) -> None:
    orders = ledger.projection.orders_of(order_type)
    is_admin = ledger.can(Capability.SELECT_ORDERS)
    widths = (0.5, 3, 2, 2, 2) if is_admin else (3, 2, 2, 2)

    with card(title):
        header = st.columns(widths)
        offset = 0
        if is_admin:
            key = f"select_all::{order_type.value}"
            st.session_state[key] = ledger.is_all_visible_selected(order_type)
            header[0].checkbox(
                "تحديد الكل",
                key=key,
                label_visibility="collapsed",
                on_change=ledger.select_all_visible,
                args=(order_type,),
            )
            offset = 1
        for col, label in zip(header[offset:], ("الاسم", "الرقم المرجعي", "التاريخ", "الحالة")):
            col.markdown(f"**{label}**")

        if not orders:
            st.caption("لا توجد بيانات لعرضها.")
            return

        for order in orders:
            cols = st.columns(widths)
            if is_admin:
                key = f"select::{order.id}"
                st.session_state[key] = ledger.selection.is_selected(order.id)
                cols[0].checkbox(
                    "تحديد",
                    key=key,
                    label_visibility="collapsed",
                    on_change=ledger.toggle_selection,
                    args=(order.id,),
                )
            cols[offset].write(order.name)
            cols[offset + 1].write(to_arabic_numerals(order.ref or MISSING_REF))
            cols[offset + 2].write(format_localized_date(order.date))
            if ledger.can(Capability.TOGGLE_STATUS):
                cols[offset + 3].button(
                    status_label(order.status),
                    key=f"status::{order.id}",
                    on_click=_on_toggle_status,
                    args=(ledger, order.id),
                )
            else:
                cols[offset + 3].markdown(_status_chip(order), unsafe_allow_html=True)


def render_page(ledger: OrderLedger) -> None:
    if ledger.can(Capability.ADD_ORDER):
        _render_add_form(ledger)

    _render_filters(ledger)

    if ledger.can(Capability.GENERATE_SUMMARY):
        _render_summary(ledger)

    expense_col, income_col = st.columns(2, gap="medium")
    with expense_col:
        _render_table(ledger, "سجل المصروفات", OrderType.EXPENSE)
    with income_col:
        _render_table(ledger, "سجل الاستلامات", OrderType.INCOME)
