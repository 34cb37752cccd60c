from __future__ import annotations

import csv
from typing import Any, Dict, Iterable, List

import pandas as pd

from db import models
from errors import backend_call

SCHEDULE_COLUMNS = "id, team_name, soapbox_name, category, race_number, heat_time, status"

CSV_HEADERS = {
    "team_name": "Team Name",
    "soapbox_name": "Soapbox Name",
    "category": "Category",
    "race_number": "Race Number",
    "heat_time": "Heat Time",
}


def fetch_race_schedule(client) -> List[Dict[str, Any]]:
    """Approved teams only, in race-number order."""
    with backend_call("load race schedule"):
        result = (
            client.table(models.TEAM_REGISTRATIONS)
            .select(SCHEDULE_COLUMNS)
            .eq("status", "approved")
            .order("race_number", desc=False)
            .execute()
        )
    return result.data or []


def filter_by_category(entries: Iterable[Dict[str, Any]], category: str = "all") -> List[Dict[str, Any]]:
    return [e for e in entries if category == "all" or e.get("category") == category]


def schedule_frame(entries: List[Dict[str, Any]]) -> pd.DataFrame:
    records = [
        {
            "team_name": e.get("team_name") or "",
            "soapbox_name": e.get("soapbox_name") or "",
            "category": e.get("category") or "",
            "race_number": e.get("race_number") or "TBD",
            "heat_time": e.get("heat_time") or "TBD",
        }
        for e in entries
    ]
    return pd.DataFrame(records, columns=list(CSV_HEADERS)).rename(columns=CSV_HEADERS)


def schedule_to_csv(entries: List[Dict[str, Any]]) -> str:
    return schedule_frame(entries).to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
