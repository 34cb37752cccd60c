from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from db import models
from errors import BackendError, NotFoundError, ValidationError, backend_call
from registration_form import RegistrationForm, members_to_insert, validate_form
from storage import UploadedDocument, upload_file

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "team_name",
    "captain_name",
    "email",
    "phone",
    "soapbox_name",
    "soapbox_description",
    "category",
    "status",
    "race_number",
    "heat_time",
)

# Stored as null when left blank in the edit form
NULLABLE_FIELDS = ("race_number", "heat_time")

EXPORT_COLUMNS = [
    "team_name",
    "captain_name",
    "email",
    "phone",
    "category",
    "soapbox_name",
    "status",
    "race_number",
    "heat_time",
    "created_at",
    "reviewed_at",
]

MEMBER_DEFAULTS = {
    "email": "",
    "phone": "",
    "role": "Team Member",
    "emergency_contact": "",
    "emergency_phone": "",
    "medical_notes": "",
}


@dataclass
class RegistrationStats:
    total: int = 0
    pending: int = 0
    approved: int = 0


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_status(status: str) -> None:
    if status not in models.REGISTRATION_STATUSES:
        raise ValidationError({"status": f"Unknown registration status: {status}"})


# --- SUBMISSION -------------------------------------------------------------

def submit_registration(
    client,
    form: RegistrationForm,
    user_id: str,
    upload: Optional[UploadedDocument] = None,
    bucket: str = "team-files",
) -> Dict[str, Any]:
    errors = validate_form(form, upload.filename if upload else None)
    if errors:
        raise ValidationError(errors)

    # 1. Optional safety form / media upload
    file_url = upload_file(client, bucket, upload) if upload else ""

    # 2. Insert registration
    with backend_call("submit registration"):
        result = (
            client.table(models.TEAM_REGISTRATIONS)
            .insert(form.to_payload(user_id, file_url))
            .execute()
        )
    if not result.data:
        raise BackendError("Failed to submit registration", detail="No data returned.")
    registration = result.data[0]

    # 3. Insert team members
    members = members_to_insert(form, registration["id"])
    if members:
        with backend_call("add team members"):
            client.table(models.TEAM_MEMBERS).insert(members).execute()

    logger.info(
        "Registration %s submitted for team %r with %d member(s)",
        registration["id"], registration.get("team_name"), len(members),
    )
    return registration


# --- RETRIEVAL --------------------------------------------------------------

def list_registrations(client, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
    with backend_call("load registrations"):
        query = client.table(models.TEAM_REGISTRATIONS).select("*")
        if user_id:
            query = query.eq("user_id", user_id)
        result = query.order("created_at", desc=True).execute()
    return result.data or []


def get_registration(client, registration_id: Any) -> Dict[str, Any]:
    with backend_call("load registration"):
        result = (
            client.table(models.TEAM_REGISTRATIONS)
            .select("*")
            .eq("id", registration_id)
            .execute()
        )
    if not result.data:
        raise NotFoundError(f"Registration {registration_id} not found")
    return result.data[0]


def list_team_members(client, registration_id: Any) -> List[Dict[str, Any]]:
    with backend_call("load team members"):
        result = (
            client.table(models.TEAM_MEMBERS)
            .select("*")
            .eq("registration_id", registration_id)
            .execute()
        )

    members = []
    for row in result.data or []:
        member = dict(row)
        for key, default in MEMBER_DEFAULTS.items():
            if not member.get(key):
                member[key] = default
        members.append(member)
    return members


# --- ADMIN UPDATES ----------------------------------------------------------

def update_registration(client, registration_id: Any, changes: Dict[str, Any]) -> Dict[str, Any]:
    """Writes the editable columns in `changes`; returns the patch applied."""
    patch: Dict[str, Any] = {}
    for key in EDITABLE_FIELDS:
        if key not in changes:
            continue
        value = changes[key]
        if isinstance(value, str):
            value = value.strip()
        if key in NULLABLE_FIELDS and value in ("", None):
            value = None
        patch[key] = value

    if "status" in patch:
        _check_status(patch["status"])
    if "category" in patch and patch["category"] not in models.CATEGORIES:
        raise ValidationError({"category": f"Unknown category: {patch['category']}"})
    if not patch:
        return {}

    with backend_call("save registration"):
        client.table(models.TEAM_REGISTRATIONS).update(patch).eq("id", registration_id).execute()

    logger.info("Registration %s updated: %s", registration_id, sorted(patch))
    return patch


def set_status(client, registration_id: Any, status: str) -> Dict[str, Any]:
    _check_status(status)
    patch = {"status": status, "reviewed_at": _utcnow()}

    with backend_call(f"mark registration {status}"):
        client.table(models.TEAM_REGISTRATIONS).update(patch).eq("id", registration_id).execute()

    logger.info("Registration %s marked %s", registration_id, status)
    return patch


def approve(client, registration_id: Any) -> Dict[str, Any]:
    return set_status(client, registration_id, "approved")


def reject(client, registration_id: Any) -> Dict[str, Any]:
    return set_status(client, registration_id, "rejected")


def registration_stats(client) -> RegistrationStats:
    table = models.TEAM_REGISTRATIONS
    with backend_call("load registration stats"):
        total = client.table(table).select("id", count="exact").execute()
        pending = client.table(table).select("id", count="exact").eq("status", "pending").execute()
        approved = client.table(table).select("id", count="exact").eq("status", "approved").execute()

    return RegistrationStats(
        total=total.count or 0,
        pending=pending.count or 0,
        approved=approved.count or 0,
    )


# --- CLIENT-SIDE FILTERING & EXPORT ----------------------------------------

def filter_registrations(
    rows: Iterable[Dict[str, Any]], search: str = "", status: str = "all"
) -> List[Dict[str, Any]]:
    needle = (search or "").strip().lower()
    matches = []
    for row in rows:
        if status != "all" and row.get("status") != status:
            continue
        if needle:
            haystack = [row.get(k) or "" for k in ("team_name", "captain_name", "email")]
            if not any(needle in str(value).lower() for value in haystack):
                continue
        matches.append(row)
    return matches


def apply_patch(rows: List[Dict[str, Any]], registration_id: Any, patch: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Optimistic local update after a successful remote write."""
    return [dict(row, **patch) if row.get("id") == registration_id else row for row in rows]


def registrations_frame(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame(rows)
    for column in EXPORT_COLUMNS:
        if column not in df.columns:
            df[column] = None
    return df[EXPORT_COLUMNS]


def registrations_to_csv(rows: List[Dict[str, Any]]) -> bytes:
    return registrations_frame(rows).to_csv(index=False).encode("utf-8")
