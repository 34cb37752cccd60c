from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from db import models
from errors import ValidationError, backend_call

logger = logging.getLogger(__name__)


def list_teams(client) -> List[Dict[str, Any]]:
    with backend_call("load teams"):
        result = client.table(models.TEAMS).select("*").order("created_at", desc=True).execute()
    return result.data or []


def filter_teams(rows: Iterable[Dict[str, Any]], search: str = "") -> List[Dict[str, Any]]:
    needle = (search or "").strip().lower()
    if not needle:
        return list(rows)
    return [
        row for row in rows
        if any(needle in str(row.get(k) or "").lower() for k in ("team_name", "captain_name", "category"))
    ]


def set_team_status(client, team_id: Any, status: str) -> Dict[str, Any]:
    if status not in models.TEAM_STATUSES:
        raise ValidationError({"status": f"Unknown team status: {status}"})

    with backend_call("update team status"):
        client.table(models.TEAMS).update({"status": status}).eq("id", team_id).execute()

    logger.info("Team %s set to %s", team_id, status)
    return {"status": status}
