"""Login and registration screen."""

from __future__ import annotations

import streamlit as st

from app.layout import queue_notice
from app.state import run_async
from core import Notice
from core.auth import AuthService

MSG_REGISTERED = "تم إنشاء الحساب بنجاح! يمكنك الآن تسجيل الدخول."
MSG_WELCOME = "مرحباً بعودتك!"


def render_page(auth: AuthService) -> None:
    is_login = st.session_state.get("auth_mode", "login") == "login"

    _, centre, _ = st.columns((1, 2, 1))
    with centre:
        st.title("تسجيل الدخول" if is_login else "إنشاء حساب جديد")
        with st.form("auth-form"):
            email = st.text_input("البريد الإلكتروني")
            password = st.text_input("كلمة المرور", type="password")
            submitted = st.form_submit_button("دخول" if is_login else "إنشاء حساب", use_container_width=True)

        if submitted:
            if is_login:
                result = run_async(auth.login(email, password))
                if result.ok:
                    queue_notice(Notice.success(MSG_WELCOME))
                    st.rerun()
            else:
                result = run_async(auth.register(email, password))
                if result.ok:
                    st.session_state["auth_mode"] = "login"
                    queue_notice(Notice.success(MSG_REGISTERED))
                    st.rerun()
            if result.error:
                st.error(result.error)

        switch_label = "ليس لديك حساب؟ أنشئ حسابًا" if is_login else "لديك حساب بالفعل؟ سجل الدخول"
        if st.button(switch_label, type="tertiary"):
            st.session_state["auth_mode"] = "register" if is_login else "login"
            st.rerun()
