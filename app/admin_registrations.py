import streamlit as st

from config import AppConfig
from db.models import CATEGORIES, REGISTRATION_STATUSES
from documents import add_team_document, list_team_documents
from errors import PortalError
from notifications import send_email, status_update_message
from registrations import (
    apply_patch,
    filter_registrations,
    get_registration,
    list_registrations,
    list_team_members,
    set_status,
    update_registration,
)
from storage import UploadedDocument
from ui_helpers import (
    category_badge,
    format_date,
    format_datetime,
    notify,
    require_admin,
    show_error,
    status_badge,
)

STATUS_FILTERS = ("all",) + REGISTRATION_STATUSES


def _load_rows(client):
    rows = list_registrations(client)
    # one-shot patch from a status change made on the previous run
    pending = st.session_state.pop("registration_patch", None)
    if pending:
        rows = apply_patch(rows, *pending)
    return rows


def _change_status(cfg: AppConfig, client, registration: dict, status: str) -> bool:
    try:
        patch = set_status(client, registration["id"], status)
    except PortalError as e:
        show_error(e, "Failed to update status")
        return False

    st.session_state.registration_patch = (registration["id"], patch)
    subject, body = status_update_message({**registration, **patch}, cfg.event)
    send_email(cfg.email, registration.get("email"), subject, body)
    notify(f"{registration.get('team_name')} marked {status}")
    return True


def render_registrations(cfg: AppConfig, client):
    if require_admin(client) is None:
        return

    selected = st.session_state.get("selected_registration")
    if selected:
        render_registration_detail(cfg, client, selected)
        return

    st.title("Registrations")

    search_col, status_col, refresh_col = st.columns([3, 1, 1])
    search = search_col.text_input("Search", placeholder="Team, captain or email")
    status = status_col.selectbox("Status", STATUS_FILTERS, format_func=str.title)
    refresh_col.button("🔄 Refresh")

    try:
        rows = _load_rows(client)
    except PortalError as e:
        show_error(e, "Failed to load registrations")
        return

    filtered = filter_registrations(rows, search, status)

    if not filtered:
        st.info("No registrations found.")
    for reg in filtered:
        with st.container(border=True):
            info, actions = st.columns([3, 2])
            info.markdown(
                f"**{reg.get('team_name')}** · {reg.get('captain_name')} · {reg.get('email')}  \n"
                f"{status_badge(reg.get('status'))} {category_badge(reg.get('category'))} "
                f"· submitted {format_date(reg.get('created_at'))}"
            )
            b1, b2, b3 = actions.columns(3)
            if b1.button("View", key=f"view-{reg['id']}"):
                st.session_state.selected_registration = reg["id"]
                st.rerun()
            if reg.get("status") == "pending":
                if b2.button("✅ Approve", key=f"approve-{reg['id']}"):
                    if _change_status(cfg, client, reg, "approved"):
                        st.rerun()
                if b3.button("❌ Reject", key=f"reject-{reg['id']}"):
                    if _change_status(cfg, client, reg, "rejected"):
                        st.rerun()

    st.caption(f"Showing **{len(filtered)}** of **{len(rows)}** registrations")


def render_registration_detail(cfg: AppConfig, client, registration_id):
    if st.button("← Back to registrations"):
        st.session_state.pop("selected_registration", None)
        st.rerun()

    try:
        registration = get_registration(client, registration_id)
        members = list_team_members(client, registration_id)
        documents = list_team_documents(client, registration_ids=[registration_id])
    except PortalError as e:
        show_error(e, "Failed to load registration")
        return

    st.title(registration.get("team_name") or "Registration")
    st.markdown(
        f"{status_badge(registration.get('status'))} {category_badge(registration.get('category'))}"
    )

    if registration.get("status") == "pending":
        a, r, w, _ = st.columns([1, 1, 1, 3])
        for col, status, label in ((a, "approved", "✅ Approve"), (r, "rejected", "❌ Reject"), (w, "waitlist", "⏳ Waitlist")):
            if col.button(label, key=f"detail-{status}"):
                if _change_status(cfg, client, registration, status):
                    st.rerun()

    overview, team, docs, activity = st.tabs(
        ["Overview", f"Team Members ({len(members)})", "Documents", "Activity"]
    )

    with overview:
        _render_edit_form(cfg, client, registration)

    with team:
        if not members:
            st.info("No team members added.")
        for member in members:
            with st.container(border=True):
                st.markdown(f"**{member.get('member_name')}** · age {member.get('member_age')} · {member['role']}")
                st.caption(
                    f"📧 {member['email'] or 'N/A'} · 📞 {member['phone'] or 'N/A'}  \n"
                    f"Emergency: {member['emergency_contact'] or 'N/A'} ({member['emergency_phone'] or 'N/A'})"
                )
                if member["medical_notes"]:
                    st.caption(f"Medical notes: {member['medical_notes']}")

    with docs:
        if registration.get("file_url"):
            st.link_button("📎 Registration upload", registration["file_url"])
        for doc in documents:
            st.markdown(f"📄 [{doc.get('title')}]({doc.get('file_url')}) · {format_date(doc.get('created_at'))}")
        with st.form("document-upload", clear_on_submit=True):
            title = st.text_input("Document title")
            uploaded = st.file_uploader("File")
            submitted = st.form_submit_button("Upload document")
        if submitted and uploaded is None:
            st.error("Choose a file to upload.")
        elif submitted:
            try:
                add_team_document(
                    client,
                    registration_id,
                    title,
                    UploadedDocument.from_streamlit(uploaded),
                    bucket=cfg.storage.documents_bucket,
                )
                notify("Document uploaded")
                st.rerun()
            except PortalError as e:
                show_error(e, "Failed to upload document")

    with activity:
        st.markdown(f"**Registration submitted** · {format_datetime(registration.get('created_at'))}")
        if registration.get("reviewed_at"):
            decision = (registration.get("status") or "reviewed").title()
            st.markdown(f"**{decision}** · {format_datetime(registration.get('reviewed_at'))}")
        else:
            st.caption("Awaiting review.")


def _render_edit_form(cfg: AppConfig, client, registration: dict) -> None:
    categories = list(CATEGORIES)
    statuses = list(REGISTRATION_STATUSES)
    category = registration.get("category") or "open"
    status = registration.get("status") or "pending"

    with st.form(f"edit-{registration['id']}"):
        c1, c2 = st.columns(2)
        changes = {
            "team_name": c1.text_input("Team Name", registration.get("team_name") or ""),
            "captain_name": c2.text_input("Captain Name", registration.get("captain_name") or ""),
            "email": c1.text_input("Email", registration.get("email") or ""),
            "phone": c2.text_input("Phone", registration.get("phone") or ""),
            "soapbox_name": c1.text_input("Soapbox Name", registration.get("soapbox_name") or ""),
            "category": c2.selectbox(
                "Category",
                categories,
                index=categories.index(category) if category in categories else 0,
                format_func=CATEGORIES.get,
            ),
            "status": c1.selectbox(
                "Status",
                statuses,
                index=statuses.index(status) if status in statuses else 0,
                format_func=str.title,
            ),
            "race_number": c2.text_input("Race Number", registration.get("race_number") or ""),
            "heat_time": c1.text_input("Heat Time", registration.get("heat_time") or ""),
            "soapbox_description": st.text_area(
                "Soapbox Description", registration.get("soapbox_description") or ""
            ),
        }
        saved = st.form_submit_button("💾 Save Changes")

    if not saved:
        return

    new_status = changes.pop("status")
    try:
        patch = update_registration(client, registration["id"], changes)
    except PortalError as e:
        show_error(e, "Failed to save changes")
        return

    # status edits stamp reviewed_at and email the captain, like the review buttons
    if new_status != status and not _change_status(cfg, client, {**registration, **patch}, new_status):
        return

    notify("Registration updated successfully")
    st.rerun()
