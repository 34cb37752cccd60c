import streamlit as st

from auth import PortalUser
from config import AppConfig
from db.models import CATEGORIES
from errors import PortalError
from schedule import fetch_race_schedule, filter_by_category, schedule_to_csv
from ui_helpers import show_error

CATEGORY_OPTIONS = {"all": "All Categories", **CATEGORIES}


def render_schedule(cfg: AppConfig, client, user: PortalUser) -> None:
    st.title("Race Schedule")
    st.caption("View the official race schedule and heat times")

    try:
        entries = fetch_race_schedule(client)
    except PortalError as e:
        show_error(e, "Failed to load race schedule")
        return

    filter_col, export_col = st.columns([3, 1])
    with filter_col:
        category = st.radio(
            "Category",
            options=list(CATEGORY_OPTIONS),
            format_func=CATEGORY_OPTIONS.get,
            horizontal=True,
            label_visibility="collapsed",
        )
    filtered = filter_by_category(entries, category)

    with export_col:
        st.download_button(
            "📥 Export CSV",
            schedule_to_csv(filtered),
            "race-schedule.csv",
            "text/csv",
            key="download-schedule",
        )

    st.caption(f"Showing {len(filtered)} registered teams")

    if not filtered:
        st.info("No teams scheduled yet. Race numbers and heat times will be assigned soon.")
        return

    st.dataframe(
        [
            {
                "Race #": e.get("race_number") or "TBD",
                "Team Name": e.get("team_name"),
                "Soapbox Name": e.get("soapbox_name"),
                "Category": CATEGORIES.get(e.get("category"), e.get("category")),
                "🕒 Heat Time": e.get("heat_time") or "TBD",
            }
            for e in filtered
        ],
        use_container_width=True,
        hide_index=True,
    )
