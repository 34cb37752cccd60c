import time

import streamlit as st

from auth import PortalUser
from config import AppConfig
from db.models import CATEGORIES
from errors import PortalError
from notifications import registration_confirmation, send_email
from registration_form import (
    ALLOWED_UPLOAD_EXTENSIONS,
    RegistrationForm,
    TeamMemberEntry,
    generate_summary,
)
from registrations import submit_registration
from storage import UploadedDocument
from ui_helpers import notify, show_error

FORM_FIELDS = ("team_name", "captain_name", "email", "phone", "soapbox_name", "soapbox_description", "category")


def _init_form_state():
    if "member_rows" not in st.session_state:
        st.session_state.member_rows = []
    if "form_version" not in st.session_state:
        st.session_state.form_version = 0


def _reset_form():
    # Bumping the version gives every widget a fresh key, clearing the inputs
    st.session_state.member_rows = []
    st.session_state.form_version += 1


def _collect_form(version: int) -> RegistrationForm:
    state = st.session_state
    form = RegistrationForm(
        **{f: state.get(f"reg-{version}-{f}") or "" for f in FORM_FIELDS}
    )
    for row_id in state.member_rows:
        form.members.append(
            TeamMemberEntry(
                member_name=state.get(f"member-{row_id}-name") or "",
                member_age=int(state.get(f"member-{row_id}-age") or 0),
            )
        )
    return form


def render_registration(cfg: AppConfig, client, user: PortalUser) -> None:
    _init_form_state()
    v = st.session_state.form_version

    st.title("Register Your Team")
    st.caption(f"Fill out this form to register your team for the {cfg.event.name}")

    col1, col2 = st.columns(2)
    with col1:
        st.text_input("Team Name *", key=f"reg-{v}-team_name")
        st.text_input("Email *", key=f"reg-{v}-email")
        st.text_input("Soapbox Name *", key=f"reg-{v}-soapbox_name")
    with col2:
        st.text_input("Captain Name *", key=f"reg-{v}-captain_name")
        st.text_input("Phone *", key=f"reg-{v}-phone")
        st.selectbox(
            "Category *",
            options=list(CATEGORIES),
            format_func=CATEGORIES.get,
            index=None,
            placeholder="Select category",
            key=f"reg-{v}-category",
        )
    st.text_area(
        "Soapbox Description",
        placeholder="Describe your soapbox design...",
        key=f"reg-{v}-soapbox_description",
    )

    # --- Team Members ---
    head, add = st.columns([4, 1])
    head.subheader("Team Members")
    if add.button("➕ Add Member"):
        st.session_state.member_rows.append(str(int(time.time() * 1000)))
        st.rerun()

    for row_id in list(st.session_state.member_rows):
        name_col, age_col, remove_col = st.columns([4, 1, 1])
        name_col.text_input("Member Name", key=f"member-{row_id}-name")
        age_col.number_input("Age", min_value=0, max_value=120, step=1, key=f"member-{row_id}-age")
        if remove_col.button("✖", key=f"member-{row_id}-remove"):
            st.session_state.member_rows.remove(row_id)
            st.rerun()

    # --- File Upload ---
    uploaded = st.file_uploader(
        "Safety Forms / Media Upload",
        type=[ext.lstrip(".") for ext in ALLOWED_UPLOAD_EXTENSIONS],
        help="Upload safety forms, photos, or other relevant documents",
        key=f"reg-{v}-file",
    )

    if not st.button("Submit Registration", type="primary", use_container_width=True):
        return

    form = _collect_form(v)
    upload = UploadedDocument.from_streamlit(uploaded) if uploaded else None

    with st.spinner("Submitting..."):
        try:
            registration = submit_registration(
                client, form, user.id, upload, bucket=cfg.storage.registration_bucket
            )
        except PortalError as e:
            show_error(e, "Failed to submit registration")
            return

    subject, body = registration_confirmation(registration, cfg.event)
    send_email(cfg.email, registration.get("email") or form.email, subject, body)

    notify("Team registration submitted successfully")
    st.success("Team registration submitted successfully")
    st.markdown(generate_summary(form))
    _reset_form()
