"""
Tests for the public race schedule.
"""

from schedule import fetch_race_schedule, filter_by_category, schedule_to_csv


def test_only_approved_teams_in_race_number_order(client, registration_rows):
    entries = fetch_race_schedule(client)
    assert [e["team_name"] for e in entries] == ["Carlingwark Comets", "Threave Thunder"]
    assert set(entries[0]) == {"id", "team_name", "soapbox_name", "category", "race_number", "heat_time", "status"}


def test_unnumbered_teams_sort_last(client, registration_rows):
    client.table("team_registrations").update({"race_number": None}).eq("team_name", "Carlingwark Comets").execute()
    entries = fetch_race_schedule(client)
    assert [e["team_name"] for e in entries] == ["Threave Thunder", "Carlingwark Comets"]


def test_category_filter(client, registration_rows):
    entries = fetch_race_schedule(client)
    assert [e["team_name"] for e in filter_by_category(entries, "under_12")] == ["Carlingwark Comets"]
    assert len(filter_by_category(entries, "all")) == 2
    assert filter_by_category(entries, "veterans") == []


def test_csv_quotes_every_field_and_fills_tbd(client, registration_rows):
    csv_text = schedule_to_csv(fetch_race_schedule(client))
    assert csv_text.splitlines() == [
        '"Team Name","Soapbox Name","Category","Race Number","Heat Time"',
        '"Carlingwark Comets","Star Cart","under_12","3","TBD"',
        '"Threave Thunder","Castle Crusher","open","7","11:30"',
    ]


def test_csv_for_empty_schedule():
    assert schedule_to_csv([]).strip() == '"Team Name","Soapbox Name","Category","Race Number","Heat Time"'
