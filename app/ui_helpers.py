from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

import streamlit as st

from auth import PortalUser, authorize, current_user
from db.models import CATEGORIES
from errors import PortalError, ValidationError

logger = logging.getLogger(__name__)

STATUS_BADGES = {
    "pending": ("Pending Review", "orange"),
    "approved": ("Approved", "green"),
    "rejected": ("Rejected", "red"),
    "waitlist": ("Waitlist", "blue"),
}

TEAM_STATUS_COLORS = {"active": "green", "inactive": "gray", "suspended": "red"}


def status_badge(status: Optional[str]) -> str:
    label, color = STATUS_BADGES.get(status or "", (status or "unknown", "gray"))
    return f":{color}[**{label}**]"


def team_status_badge(status: Optional[str]) -> str:
    return f":{TEAM_STATUS_COLORS.get(status or '', 'gray')}[**{status}**]"


def category_badge(category: Optional[str]) -> str:
    color = "violet" if category == "under_12" else "orange"
    return f":{color}[{CATEGORIES.get(category or '', 'Open')}]"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def format_date(value: Optional[str]) -> str:
    ts = parse_timestamp(value)
    return ts.strftime("%d %b %Y") if ts else "N/A"


def format_datetime(value: Optional[str]) -> str:
    ts = parse_timestamp(value)
    return ts.strftime("%d %b %Y at %H:%M") if ts else "N/A"


def show_error(exc: Exception, fallback: str = "Something went wrong") -> None:
    """One error message per failed action; the details go to the log."""
    if isinstance(exc, ValidationError):
        st.error("  \n".join(exc.errors.values()) or exc.message)
    elif isinstance(exc, PortalError):
        st.error(exc.message)
    else:
        logger.exception(fallback)
        st.error(fallback)


def notify(message: str) -> None:
    st.toast(message, icon="✅")


def require_admin(client) -> Optional[PortalUser]:
    """Protected-route guard for admin pages; re-checks the profile on every render."""
    user = current_user(client)
    if not authorize(user, "admin"):
        st.warning("Admin privileges required to view this page.")
        return None
    return user
