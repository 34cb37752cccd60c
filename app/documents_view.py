import streamlit as st

from auth import PortalUser
from config import AppConfig
from documents import download_team_document, list_team_documents
from errors import PortalError
from registrations import list_registrations
from ui_helpers import format_date, show_error


def render_documents(cfg: AppConfig, client, user: PortalUser) -> None:
    st.title("Team Documents")
    st.caption("Access your team-specific documents and forms")

    try:
        if user.is_admin:
            documents = list_team_documents(client)
        else:
            own = [r["id"] for r in list_registrations(client, user_id=user.id)]
            documents = list_team_documents(client, registration_ids=own)
    except PortalError as e:
        show_error(e, "Failed to load team documents")
        return

    if not documents:
        st.info(
            "No documents yet. Your team-specific documents will appear here "
            "once uploaded by the organizers."
        )
        return

    columns = st.columns(3)
    for i, doc in enumerate(documents):
        with columns[i % 3]:
            with st.container(border=True):
                st.markdown(f"📄 **{doc.get('title')}**")
                if doc.get("team_name"):
                    st.caption(f"Team: {doc['team_name']}")
                st.caption(f"📅 {format_date(doc.get('created_at'))}")

                view_col, download_col = st.columns(2)
                view_col.link_button("👁 View", doc["file_url"], use_container_width=True)
                if download_col.button("⬇ Fetch", key=f"fetch-{doc['id']}", use_container_width=True):
                    try:
                        st.session_state[f"doc-bytes-{doc['id']}"] = download_team_document(
                            client, doc, bucket=cfg.storage.documents_bucket
                        )
                    except PortalError as e:
                        show_error(e, "Failed to download document")

                data = st.session_state.get(f"doc-bytes-{doc['id']}")
                if data is not None:
                    st.download_button(
                        "💾 Save file",
                        data,
                        file_name=doc.get("title") or "document",
                        key=f"save-{doc['id']}",
                        use_container_width=True,
                    )
