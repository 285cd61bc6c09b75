# nextgenfit/crud/profile.py
import json
from datetime import datetime, timezone

from databases import Database

PROFILE_COLUMNS = (
    "user_id", "units", "gender", "age", "weight", "height",
    "goal", "workout_routine", "selected_plan", "updated_at",
)


def _now() -> str:
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat(sep=" ", timespec="seconds")


class ProfileStore:
    """Remote profile record (`user_plans`), always keyed by user_id."""

    def __init__(self, db: Database):
        self.db = db

    async def fetch(self, user_id: str) -> dict | None:
        query = f"SELECT {', '.join(PROFILE_COLUMNS)} FROM user_plans WHERE user_id = :user_id"
        row = await self.db.fetch_one(query=query, values={"user_id": user_id})
        if row is None:
            return None

        profile = {column: row[column] for column in PROFILE_COLUMNS}
        if profile["workout_routine"]:
            profile["workout_routine"] = json.loads(profile["workout_routine"])
        return profile

    async def upsert(self, user_id: str, **fields) -> None:
        """Insert or replace the given columns of the user's record. Untouched columns keep their values."""
        unknown = set(fields) - set(PROFILE_COLUMNS)
        if unknown:
            raise ValueError(f"unknown profile columns: {sorted(unknown)}")

        values = {"user_id": user_id, **fields}
        if "workout_routine" in values and values["workout_routine"] is not None:
            values["workout_routine"] = json.dumps(values["workout_routine"], ensure_ascii=False)
        values.setdefault("updated_at", _now())

        columns = list(values)
        updates = [c for c in columns if c != "user_id"]
        placeholders = ", ".join(f":{c}" for c in columns)

        if self.db.url.dialect == "mysql":
            conflict = "ON DUPLICATE KEY UPDATE " + ", ".join(f"{c}=VALUES({c})" for c in updates)
        else:
            conflict = "ON CONFLICT (user_id) DO UPDATE SET " + ", ".join(f"{c}=excluded.{c}" for c in updates)

        query = f"INSERT INTO user_plans ({', '.join(columns)}) VALUES ({placeholders}) {conflict}"
        await self.db.execute(query=query, values=values)

    async def clear_routine(self, user_id: str) -> None:
        # 행 삭제가 아니라 루틴만 비운다
        query = "UPDATE user_plans SET workout_routine = NULL, updated_at = :updated_at WHERE user_id = :user_id"
        await self.db.execute(query=query, values={"user_id": user_id, "updated_at": _now()})
