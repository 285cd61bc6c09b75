"""
Shared fixtures: a temp-dir LocalCache, an in-memory fake Profile Store and
canned model responses.
"""
import copy
import json

import pytest

from nextgenfit.utils.local_cache import LocalCache

SEVEN_DAYS = [
    {"title": "Push Day", "desc": "Brust und Schultern.", "exercises": [
        {"name": "Bankdrücken", "sets": "3", "reps": "8-12", "notes": "Kontrolliert"},
        {"name": "Schulterdrücken", "sets": 3, "reps": 10},
    ]},
    {"title": "Active Recovery", "desc": "Lockeres Gehen.", "exercises": []},
    {"title": "Pull Day", "desc": "Rücken und Bizeps.", "exercises": [
        {"name": "Klimmzüge", "sets": "4", "reps": "6-8"},
    ]},
    {"title": "Ruhetag", "desc": "Erholung.", "exercises": []},
    {"title": "Leg Day", "desc": "Beine.", "exercises": [
        {"name": "Kniebeugen", "sets": "4", "reps": "8"},
    ]},
    {"title": "Mobility", "desc": "Dehnen.", "exercises": []},
    {"title": "Ruhetag", "desc": "Erholung.", "exercises": []},
]


class FakeProfileStore:
    """Stands in for ProfileStore; records every call and can be told to fail."""

    def __init__(self, fail_writes=False, fail_reads=False):
        self.records = {}
        self.calls = []
        self.fail_writes = fail_writes
        self.fail_reads = fail_reads

    async def fetch(self, user_id):
        self.calls.append(("fetch", user_id))
        if self.fail_reads:
            raise ConnectionError("profile store unreachable")
        return copy.deepcopy(self.records.get(user_id))

    async def upsert(self, user_id, **fields):
        self.calls.append(("upsert", user_id, copy.deepcopy(fields)))
        if self.fail_writes:
            raise ConnectionError("column workout_routine does not exist")
        record = self.records.setdefault(user_id, {"user_id": user_id})
        record.update(copy.deepcopy(fields))

    async def clear_routine(self, user_id):
        self.calls.append(("clear_routine", user_id))
        if self.fail_writes:
            raise ConnectionError("profile store unreachable")
        if user_id in self.records:
            self.records[user_id]["workout_routine"] = None

    def remote_calls(self):
        return [c for c in self.calls if c[0] != "fetch"]


@pytest.fixture
def seven_days():
    return copy.deepcopy(SEVEN_DAYS)


@pytest.fixture
def plan_json(seven_days):
    return json.dumps(seven_days, ensure_ascii=False)


@pytest.fixture
def local_cache(tmp_path):
    return LocalCache(str(tmp_path), "test-client")


@pytest.fixture
def store():
    return FakeProfileStore()
