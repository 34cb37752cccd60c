import streamlit as st

from announcements import AUDIENCES, audience_label, category_icon, filter_by_audience, list_announcements
from auth import PortalUser
from config import AppConfig
from errors import PortalError
from ui_helpers import format_datetime, show_error

CATEGORY_COLORS = {"urgent": "red", "info": "blue"}
AUDIENCE_COLORS = {"open": "orange", "under_12": "violet"}


def render_announcements(cfg: AppConfig, client, user: PortalUser) -> None:
    st.title("Announcements")
    st.caption("Stay updated with the latest race information")

    try:
        announcements = list_announcements(client)
    except PortalError as e:
        show_error(e, "Failed to load announcements")
        return

    audience = st.radio(
        "Show announcements for",
        options=list(AUDIENCES),
        format_func=AUDIENCES.get,
        horizontal=True,
    )
    announcements = filter_by_audience(announcements, audience)

    if not announcements:
        st.info("No announcements yet. Check back later for race updates and important information.")
        return

    for item in announcements:
        category = item.get("category") or "general"
        with st.container(border=True):
            st.markdown(f"### {category_icon(category)} {item.get('title')}")
            st.markdown(
                f":{CATEGORY_COLORS.get(category, 'gray')}[{category}] · "
                f":{AUDIENCE_COLORS.get(item.get('audience'), 'green')}[👥 {audience_label(item.get('audience'))}]"
            )
            st.caption(format_datetime(item.get("created_at")))
            st.text(item["body"])
