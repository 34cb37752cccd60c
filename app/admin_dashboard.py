import streamlit as st
import pandas as pd
import plotly.express as px

from announcements import ANNOUNCEMENT_CATEGORIES, AUDIENCES, post_announcement
from config import AppConfig
from db.models import REGISTRATION_STATUSES
from errors import PortalError
from registrations import list_registrations, registration_stats, registrations_to_csv
from ui_helpers import notify, require_admin, show_error


def render_admin_dashboard(cfg: AppConfig, client):
    st.title("📊 Admin Dashboard")

    if require_admin(client) is None:
        return

    # --- Fetch Data ---
    try:
        stats = registration_stats(client)
        rows = list_registrations(client)
    except PortalError as e:
        show_error(e, "Error loading data")
        return

    # --- KPI Metrics ---
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Teams", stats.total)
    col1.caption(f"{stats.approved} approved • {stats.pending} pending")
    col2.metric("Pending Approvals", stats.pending)
    col2.caption("All caught up!" if stats.pending == 0 else "Needs review")
    col3.metric("Approved Teams", stats.approved)

    # --- Status chart ---
    st.divider()
    st.subheader("Registrations by Status")
    if rows:
        df = pd.DataFrame(rows)
        counts = (
            df["status"].value_counts()
            .reindex(list(REGISTRATION_STATUSES), fill_value=0)
            .rename_axis("status")
            .reset_index(name="teams")
        )
        fig = px.bar(counts, x="status", y="teams", color="status")
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No registrations found in the database.")

    # --- Actions: Export ---
    c1, c2 = st.columns([2, 1])
    with c2:
        st.write("### Export")
        st.download_button(
            "📥 Download as CSV",
            registrations_to_csv(rows),
            "team_registrations.csv",
            "text/csv",
            key="download-registrations",
        )

    # --- Actions: Post Announcement ---
    with c1:
        st.write("### Post Announcement")
        with st.form("announcement-form", clear_on_submit=True):
            title = st.text_input("Title")
            content = st.text_area("Message")
            category = st.selectbox("Category", ANNOUNCEMENT_CATEGORIES)
            audience = st.selectbox("Audience", list(AUDIENCES), format_func=AUDIENCES.get)
            submitted = st.form_submit_button("Post")
        if submitted:
            try:
                post_announcement(client, title, content, category, audience)
                notify("Announcement posted")
            except PortalError as e:
                show_error(e, "Failed to post announcement")
