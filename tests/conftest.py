"""
Pytest configuration and shared fixtures for the portal tests.

FakeSupabase mimics the slice of the supabase-py client the portal uses:
table queries, storage buckets and auth.
"""

import itertools
import re
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

# app/ modules import each other by bare name, db/ lives at the root
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))
sys.path.insert(0, str(ROOT / "app"))


class FakeAPIError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class FakeQuery:
    def __init__(self, backend, table):
        self.backend = backend
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.count = None
        self.payload = None
        self.filters = []
        self.order_by = None
        self.row_limit = None
        self.maybe = False

    def select(self, *columns, count=None):
        self.columns = columns[0] if columns else "*"
        self.count = count
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def maybe_single(self):
        self.maybe = True
        return self

    def _matches(self, rows):
        return [r for r in rows if all(f(r) for f in self.filters)]

    def _join(self, row):
        plain = [c.strip() for c in re.sub(r"\w+\([^)]*\)", "", self.columns).split(",") if c.strip()]
        out = dict(row) if "*" in plain else {c: row.get(c) for c in plain}
        for related, fields in re.findall(r"(\w+)\(([\w,\s]+)\)", self.columns):
            parent = next(
                (p for p in self.backend.tables.get(related, []) if p["id"] == row.get("registration_id")),
                None,
            )
            out[related] = (
                {f.strip(): parent.get(f.strip()) for f in fields.split(",")} if parent else None
            )
        return out

    def execute(self):
        self.backend.calls.append((self.table, self.op))
        if (self.table, self.op) in self.backend.failures:
            raise FakeAPIError(f"{self.op} on {self.table} failed")

        rows = self.backend.tables.setdefault(self.table, [])

        if self.op == "insert":
            if self.table in self.backend.silent_inserts:
                # row-level security can swallow the returned representation
                return SimpleNamespace(data=[], count=None)
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for item in items:
                row = {"id": f"{self.table}-{next(self.backend.ids)}", "created_at": self.backend.now()}
                row.update(item)
                rows.append(row)
                created.append(dict(row))
            return SimpleNamespace(data=created, count=None)

        matched = self._matches(rows)

        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(r) for r in matched], count=None)

        if self.order_by:
            column, desc = self.order_by
            present = sorted((r for r in matched if r.get(column) is not None), key=lambda r: r[column], reverse=desc)
            matched = present + [r for r in matched if r.get(column) is None]
        count = len(matched) if self.count else None
        if self.row_limit is not None:
            matched = matched[: self.row_limit]
        data = [self._join(r) for r in matched]

        if self.maybe:
            # older postgrest clients return no response for a missing row
            return SimpleNamespace(data=data[0], count=None) if data else None
        return SimpleNamespace(data=data, count=count)


class FakeBucket:
    def __init__(self, backend, name):
        self.backend = backend
        self.name = name

    def upload(self, path, file, file_options=None):
        if ("storage", self.name) in self.backend.failures:
            raise FakeAPIError("The resource already exists")
        self.backend.files[(self.name, path)] = file
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://derby.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def download(self, path):
        try:
            return self.backend.files[(self.name, path)]
        except KeyError:
            raise FakeAPIError("Object not found")


class FakeStorage:
    def __init__(self, backend):
        self.backend = backend

    def from_(self, bucket):
        return FakeBucket(self.backend, bucket)


class FakeAuth:
    def __init__(self, backend):
        self.backend = backend
        self.accounts = {}
        self.user = None

    def add_account(self, email, password, user_id):
        self.accounts[email] = (password, SimpleNamespace(id=user_id, email=email, user_metadata={}))
        return self.accounts[email][1]

    def sign_in_with_password(self, credentials):
        account = self.accounts.get(credentials["email"])
        if account is None or account[0] != credentials["password"]:
            raise FakeAPIError("Invalid login credentials")
        self.user = account[1]
        return SimpleNamespace(user=self.user, session=SimpleNamespace(access_token="token"))

    def sign_up(self, credentials):
        if credentials["email"] in self.accounts:
            raise FakeAPIError("User already registered")
        user = self.add_account(credentials["email"], credentials["password"], f"user-{next(self.backend.ids)}")
        user.user_metadata = credentials.get("options", {}).get("data", {})
        return SimpleNamespace(user=user, session=None)

    def sign_out(self):
        self.user = None

    def get_user(self):
        if self.user is None:
            return None
        return SimpleNamespace(user=self.user)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.files = {}
        self.calls = []
        self.failures = set()
        self.silent_inserts = set()
        self.ids = itertools.count(1)
        self._clock = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)
        self.storage = FakeStorage(self)
        self.auth = FakeAuth(self)

    def now(self):
        # strictly increasing so created_at ordering is deterministic
        self._clock += timedelta(minutes=1)
        return self._clock.isoformat()

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, op):
        self.failures.add((table, op))

    def return_nothing(self, table):
        self.silent_inserts.add(table)


@pytest.fixture
def client():
    return FakeSupabase()


@pytest.fixture
def registration_rows(client):
    """Four registrations, one per status, oldest first."""
    rows = [
        {"team_name": "Gravity Girls", "captain_name": "Ailsa Reid", "email": "ailsa@example.com",
         "category": "under_12", "status": "pending", "race_number": None, "heat_time": None,
         "soapbox_name": "Pink Panther", "user_id": "user-a"},
        {"team_name": "Threave Thunder", "captain_name": "Rob Kerr", "email": "rob@example.com",
         "category": "open", "status": "approved", "race_number": "7", "heat_time": "11:30",
         "soapbox_name": "Castle Crusher", "user_id": "user-b"},
        {"team_name": "Dee Demons", "captain_name": "Morag Bell", "email": "morag@example.com",
         "category": "open", "status": "rejected", "race_number": None, "heat_time": None,
         "soapbox_name": "Red Devil", "user_id": "user-a"},
        {"team_name": "Carlingwark Comets", "captain_name": "Sam Duff", "email": "sam@example.com",
         "category": "under_12", "status": "approved", "race_number": "3", "heat_time": None,
         "soapbox_name": "Star Cart", "user_id": "user-c"},
    ]
    return client.table("team_registrations").insert(rows).execute().data
