"""User role management panel."""

from __future__ import annotations

import streamlit as st

from app.state import run_async
from core import User, UserRole
from core.auth import AuthService
from core.formatting import role_label
from core.permissions import PermissionDenied, can_change_role, is_super_admin


def _on_role_change(auth: AuthService, actor: User, target: User, key: str) -> None:
    new_role = UserRole(st.session_state[key])
    if new_role is target.role:
        return
    try:
        run_async(auth.change_role(actor, target.id, new_role))
    except PermissionDenied:
        st.session_state[key] = target.role.value


def render_page(auth: AuthService, actor: User) -> None:
    users = run_async(auth.list_users())

    st.subheader("إدارة صلاحيات المستخدمين")
    header_cols = st.columns((3, 2))
    header_cols[0].markdown("**البريد الإلكتروني**")
    header_cols[1].markdown("**الدور الحالي**")

    for user in sorted(users, key=lambda item: item.email):
        cols = st.columns((3, 2))
        cols[0].write(user.email)
        if is_super_admin(user, auth.super_admin_email):
            cols[1].markdown("**أدمن رئيسي**")
            continue
        key = f"role::{user.id}"
        st.session_state[key] = user.role.value
        cols[1].selectbox(
            "الدور",
            [role.value for role in (UserRole.GUEST, UserRole.ADMIN)],
            key=key,
            format_func=lambda value: role_label(UserRole(value)),
            disabled=not can_change_role(actor, user, auth.super_admin_email),
            label_visibility="collapsed",
            on_change=_on_role_change,
            args=(auth, actor, user, key),
        )

    st.caption("فقط الأدمن الرئيسي يمكنه تغيير صلاحيات المستخدمين.")
