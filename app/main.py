from __future__ import annotations

import sys
import os
import logging

# --- Add project root to sys.path ---
current_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(current_dir)
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

import streamlit as st

# IMPORTS
from config import load_config
from logging_config import configure_logging
from auth import PortalUser, current_user, sign_out
from db.database import get_supabase_client, reset_supabase_client
from errors import PortalError
from ui_helpers import notify, show_error

from login_view import render_login
from dashboard_view import render_dashboard
from registration_view import render_registration
from documents_view import render_documents
from announcements_view import render_announcements
from schedule_view import render_schedule
from admin_dashboard import render_admin_dashboard
from admin_registrations import render_registrations
from admin_teams import render_teams

logger = logging.getLogger(__name__)

USER_PAGES = {
    "🏠 Dashboard": render_dashboard,
    "📝 Register Team": render_registration,
    "📄 Documents": render_documents,
    "📣 Announcements": render_announcements,
    "📅 Race Schedule": render_schedule,
}

ADMIN_PAGES = {
    "⚙️ Admin Dashboard": render_admin_dashboard,
    "🗂️ Registrations": render_registrations,
    "👥 Manage Teams": render_teams,
}


def _init_app_state():
    if "user" not in st.session_state:
        st.session_state.user = None
    if "flash" not in st.session_state:
        st.session_state.flash = None


def render_header(cfg, client, user: PortalUser):
    with st.sidebar:
        st.title(f"🏁 {cfg.event.name}")
        st.caption(cfg.event.tagline)
        if user.is_admin:
            st.markdown(":red[**Admin**]")
        st.write(f"👤 {user.email}")
        if st.button("Logout", use_container_width=True):
            try:
                sign_out(client)
            except PortalError as e:
                show_error(e)
                return
            st.session_state.clear()
            reset_supabase_client()
            st.rerun()
        st.divider()


def main():
    cfg = load_config()
    configure_logging(cfg.logging)

    st.set_page_config(
        page_title=cfg.event.name,
        page_icon="🏁",
        layout="wide",
        initial_sidebar_state="expanded",
    )
    _init_app_state()

    try:
        client = get_supabase_client()
    except Exception:
        logger.exception("Could not create Supabase client")
        st.error("The portal is not configured. Add your Supabase url and anon_key to .streamlit/secrets.toml.")
        return

    # Re-derive the user and admin flag from the hosted auth on every run
    user = current_user(client)
    st.session_state.user = user

    if user is None:
        render_login(cfg, client)
        return

    if st.session_state.flash:
        notify(st.session_state.flash)
        st.session_state.flash = None

    render_header(cfg, client, user)

    # --- SIDEBAR NAVIGATION ---
    pages = dict(USER_PAGES)
    if user.is_admin:
        pages.update(ADMIN_PAGES)

    with st.sidebar:
        choice = st.radio("Go to", list(pages))

    if choice in ADMIN_PAGES:
        pages[choice](cfg, client)
    else:
        pages[choice](cfg, client, user)


if __name__ == "__main__":
    main()
