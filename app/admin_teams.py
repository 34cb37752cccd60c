import streamlit as st

from config import AppConfig
from db.models import CATEGORIES, TEAM_STATUSES
from errors import PortalError
from teams import filter_teams, list_teams, set_team_status
from ui_helpers import notify, require_admin, show_error, team_status_badge


def render_teams(cfg: AppConfig, client):
    if require_admin(client) is None:
        return

    st.title("Team Management")

    search = st.text_input("Search teams", placeholder="Team, captain or category")

    try:
        teams = list_teams(client)
    except PortalError as e:
        show_error(e, "Failed to load teams")
        return

    filtered = filter_teams(teams, search)

    if not filtered:
        st.info("No teams found.")
    for team in filtered:
        with st.container(border=True):
            info, actions = st.columns([3, 2])
            info.markdown(
                f"**{team.get('team_name')}** · {team.get('captain_name')} · "
                f"{CATEGORIES.get(team.get('category'), team.get('category'))}  \n"
                f"{team_status_badge(team.get('status'))}"
            )
            buttons = actions.columns(len(TEAM_STATUSES))
            for col, status in zip(buttons, TEAM_STATUSES):
                if col.button(
                    status.title(),
                    key=f"team-{team['id']}-{status}",
                    disabled=team.get("status") == status,
                ):
                    try:
                        set_team_status(client, team["id"], status)
                        notify(f"{team.get('team_name')} is now {status}")
                        st.rerun()
                    except PortalError as e:
                        show_error(e, "Failed to update team status")

    st.caption(f"Showing **{len(filtered)}** of **{len(teams)}** teams")
