"""
ProfileStore against a real (temporary) SQLite database through `databases`.
"""
import asyncio

import pytest
import sqlalchemy
from databases import Database

from nextgenfit.crud.profile import ProfileStore
from nextgenfit.models import metadata

ROUTINE = {"days": [{"day_name": "Montag", "title": "Push Day", "desc": "", "exercises": []}]}


@pytest.fixture
def db_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'profiles.db'}"
    engine = sqlalchemy.create_engine(url)
    metadata.create_all(engine)
    engine.dispose()
    return url


def run(db_url, scenario):
    async def _run():
        database = Database(db_url)
        await database.connect()
        try:
            return await scenario(ProfileStore(database))
        finally:
            await database.disconnect()
    return asyncio.run(_run())


def test_fetch_missing_user_returns_none(db_url):
    async def scenario(store):
        return await store.fetch("nobody")

    assert run(db_url, scenario) is None


def test_upsert_inserts_then_updates_only_given_columns(db_url):
    async def scenario(store):
        await store.upsert("u1", units="metric", age=30, goal="build_muscle")
        await store.upsert("u1", workout_routine=ROUTINE)
        return await store.fetch("u1")

    profile = run(db_url, scenario)

    assert profile["age"] == 30
    assert profile["goal"] == "build_muscle"
    assert profile["workout_routine"] == ROUTINE
    assert profile["updated_at"]


def test_upsert_replaces_on_existing_user_id(db_url):
    async def scenario(store):
        await store.upsert("u1", selected_plan="basic")
        await store.upsert("u1", selected_plan="pro")
        rows = await store.db.fetch_all("SELECT user_id FROM user_plans")
        return len(rows), await store.fetch("u1")

    count, profile = run(db_url, scenario)

    assert count == 1
    assert profile["selected_plan"] == "pro"


def test_clear_routine_keeps_the_record(db_url):
    async def scenario(store):
        await store.upsert("u1", age=30, workout_routine=ROUTINE)
        await store.clear_routine("u1")
        return await store.fetch("u1")

    profile = run(db_url, scenario)

    assert profile["age"] == 30
    assert profile["workout_routine"] is None


def test_unknown_column_is_rejected(db_url):
    async def scenario(store):
        await store.upsert("u1", password="hunter2")

    with pytest.raises(ValueError):
        run(db_url, scenario)
