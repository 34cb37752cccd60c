import streamlit as st

from announcements import category_icon, list_announcements
from auth import PortalUser
from config import AppConfig
from errors import PortalError
from registrations import list_registrations
from ui_helpers import category_badge, format_date, show_error, status_badge


def render_dashboard(cfg: AppConfig, client, user: PortalUser) -> None:
    st.title("Team Dashboard")
    st.caption(f"Welcome to the {cfg.event.name} portal")

    try:
        registrations = list_registrations(client, user_id=user.id)
        announcements = list_announcements(client, limit=5)
    except PortalError as e:
        show_error(e)
        return

    left, right = st.columns([2, 1])

    with left:
        st.subheader("👥 Your Team Registrations")
        if not registrations:
            st.info('No team registrations yet. Choose "Register Team" to get started!')
        for reg in registrations:
            with st.container(border=True):
                st.markdown(
                    f"### {reg.get('team_name')}  \n"
                    f"{status_badge(reg.get('status'))} {category_badge(reg.get('category'))}"
                )
                st.write(f"Captain: {reg.get('captain_name')}")
                if reg.get("race_number"):
                    line = f"Race #: {reg['race_number']}"
                    if reg.get("heat_time"):
                        line += f" · Heat Time: {reg['heat_time']}"
                    st.write(line)
                st.caption(f"Registered: {format_date(reg.get('created_at'))}")

    with right:
        st.subheader("📣 Latest Announcements")
        if not announcements:
            st.info("No announcements yet.")
        for item in announcements:
            st.markdown(f"{category_icon(item['category'])} **{item.get('title')}**")
            st.caption(item["body"])
            st.caption(format_date(item.get("created_at")))
            st.divider()
