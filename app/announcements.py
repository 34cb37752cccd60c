from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from db import models
from errors import ValidationError, backend_call

logger = logging.getLogger(__name__)

ANNOUNCEMENT_CATEGORIES = ("general", "info", "urgent")

AUDIENCES = {
    "all": "All Teams",
    "open": "Open Category",
    "under_12": "Under 12",
}

CATEGORY_ICONS = {
    "urgent": "🚨",
    "info": "ℹ️",
}


def list_announcements(client, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    with backend_call("load announcements"):
        query = client.table(models.ANNOUNCEMENTS).select("*").order("created_at", desc=True)
        if limit:
            query = query.limit(limit)
        result = query.execute()

    announcements = []
    for row in result.data or []:
        item = dict(row)
        # older rows store the text in `message`
        item["body"] = item.get("content") or item.get("message") or ""
        item.setdefault("category", "general")
        item.setdefault("audience", "all")
        announcements.append(item)
    return announcements


def post_announcement(
    client,
    title: str,
    content: str,
    category: str = "general",
    audience: str = "all",
) -> Dict[str, Any]:
    errors = {}
    if not (title or "").strip():
        errors["title"] = "Title is required."
    if not (content or "").strip():
        errors["content"] = "Message is required."
    if category not in ANNOUNCEMENT_CATEGORIES:
        errors["category"] = f"Unknown category: {category}"
    if audience not in AUDIENCES:
        errors["audience"] = f"Unknown audience: {audience}"
    if errors:
        raise ValidationError(errors)

    payload = {
        "title": title.strip(),
        "content": content.strip(),
        "category": category,
        "audience": audience,
    }
    with backend_call("post announcement"):
        result = client.table(models.ANNOUNCEMENTS).insert(payload).execute()

    logger.info("Announcement %r posted for %s", payload["title"], audience)
    return result.data[0] if result.data else payload


def filter_by_audience(rows: Iterable[Dict[str, Any]], audience: str = "all") -> List[Dict[str, Any]]:
    """`all` shows everything; a category also keeps announcements for all teams."""
    if audience == "all":
        return list(rows)
    return [r for r in rows if r.get("audience", "all") in ("all", audience)]


def audience_label(audience: Optional[str]) -> str:
    return AUDIENCES.get(audience or "all", "Under 12")


def category_icon(category: Optional[str]) -> str:
    return CATEGORY_ICONS.get(category or "", "📣")
