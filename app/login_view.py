import streamlit as st

from auth import sign_in, sign_in_admin, sign_up
from config import AppConfig
from errors import PortalError
from ui_helpers import show_error


def render_login(cfg: AppConfig, client) -> None:
    _, middle, _ = st.columns([1, 2, 1])
    with middle:
        st.title(f"🏁 {cfg.event.name}")
        st.caption(cfg.event.tagline)

        login_tab, signup_tab, admin_tab = st.tabs(["Login", "Sign Up", "🛡️ Admin"])

        with login_tab:
            with st.form("login-form"):
                email = st.text_input("Email")
                password = st.text_input("Password", type="password")
                submitted = st.form_submit_button("Sign In", use_container_width=True)
            if submitted:
                try:
                    st.session_state.user = sign_in(client, email, password)
                    st.session_state.flash = "Welcome back!"
                    st.rerun()
                except PortalError as e:
                    show_error(e)

        with signup_tab:
            with st.form("signup-form"):
                full_name = st.text_input("Full Name")
                email = st.text_input("Email", key="signup-email")
                password = st.text_input("Password", type="password", key="signup-password")
                submitted = st.form_submit_button("Create Account", use_container_width=True)
            if submitted:
                if not full_name.strip():
                    st.error("Full name is required.")
                else:
                    try:
                        sign_up(client, email, password, full_name)
                        st.success("Account created! Please check your email for verification.")
                    except PortalError as e:
                        show_error(e)

        with admin_tab:
            with st.form("admin-login-form"):
                email = st.text_input("Admin Email")
                password = st.text_input("Admin Password", type="password")
                submitted = st.form_submit_button(
                    "🛡️ Admin Sign In", type="primary", use_container_width=True
                )
            st.caption("Admin access only. Unauthorized access is prohibited.")
            if submitted:
                try:
                    st.session_state.user = sign_in_admin(client, email, password)
                    st.session_state.flash = "Welcome back, Admin!"
                    st.rerun()
                except PortalError as e:
                    show_error(e)
