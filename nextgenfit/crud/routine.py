# nextgenfit/crud/routine.py
"""
Persistence coordinator: Local Cache first, Profile Store second.

The local write always happens. The remote write follows ``write_policy``,
which governs save and delete alike:

- ``best_effort``: remote errors are logged and reported as a warning.
- ``strict``: remote errors raise ``RemoteWriteFailed``.

A request without a client identity has no Local Cache (``local=None``):
local writes report ``local_saved=False`` and reads see no local routine.

``read_policy`` decides what a read does when the remote profile has no
routine but the local cache does: ``merge`` grafts it onto the result,
``write_back`` grafts it and pushes it to the remote record, ``remote_only``
ignores the local copy whenever a remote record exists.
"""
import logging
from typing import Optional

from pydantic import ValidationError

from nextgenfit.core.exceptions import NotAuthenticated, RemoteWriteFailed
from nextgenfit.crud.profile import ProfileStore
from nextgenfit.schemas.plan import PersistenceResult, WeeklyPlan
from nextgenfit.schemas.user import OnboardingData, UserProfile
from nextgenfit.utils.local_cache import ONBOARDING_KEY, ROUTINE_KEY, LocalCache
from nextgenfit.utils.onboarding import parse_leading_float, parse_leading_int

logger = logging.getLogger(__name__)

WRITE_POLICIES = ("best_effort", "strict")
READ_POLICIES = ("merge", "write_back", "remote_only")

FALLBACK_AGE = 25


class RoutinePersistence:
    def __init__(
        self,
        local: Optional[LocalCache],
        store: ProfileStore,
        user_id: Optional[str] = None,
        write_policy: str = "best_effort",
        read_policy: str = "merge",
    ):
        if write_policy not in WRITE_POLICIES:
            raise ValueError(f"write_policy must be one of {WRITE_POLICIES}")
        if read_policy not in READ_POLICIES:
            raise ValueError(f"read_policy must be one of {READ_POLICIES}")
        self.local = local
        self.store = store
        self.user_id = user_id
        self.write_policy = write_policy
        self.read_policy = read_policy

    def _local_warning(self) -> str:
        return "No local cache for this client" if self.local is None else "Local cache write failed"

    def _write_local(self, key: str, value) -> bool:
        if self.local is None:
            return False
        try:
            self.local.set(key, value)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Local cache write failed for '%s': %s", key, e)
            return False

    def _remote_failed(self, action: str, error: Exception, local_saved: bool, warning: str) -> PersistenceResult:
        logger.warning("Cloud %s failed for user %s: %s", action, self.user_id, error)
        if self.write_policy == "strict":
            raise RemoteWriteFailed(f"Cloud {action} failed", detail=str(error)) from error
        return PersistenceResult(success=True, local_saved=local_saved, remote_saved=False, warning=warning)

    async def save_workout_routine(self, plan: WeeklyPlan | dict) -> PersistenceResult:
        routine = plan.model_dump() if isinstance(plan, WeeklyPlan) else plan

        # 1. 로컬 저장은 항상 먼저
        local_saved = self._write_local(ROUTINE_KEY, routine)
        warning = None if local_saved else self._local_warning()

        # 2. 익명 사용자는 로컬 저장으로 충분
        if not self.user_id:
            return PersistenceResult(local_saved=local_saved, warning=warning)

        # 3. 클라우드 저장 (best effort)
        try:
            await self.store.upsert(self.user_id, workout_routine=routine)
        except Exception as e:
            return self._remote_failed("save", e, local_saved, "Saved locally only")
        return PersistenceResult(local_saved=local_saved, remote_saved=True, warning=warning)

    async def delete_user_plan(self) -> PersistenceResult:
        local_saved = False
        if self.local is not None:
            try:
                self.local.remove(ROUTINE_KEY)
                local_saved = True
            except OSError as e:
                logger.warning("Local cache delete failed: %s", e)

        if not self.user_id:
            return PersistenceResult(local_saved=local_saved)

        try:
            await self.store.clear_routine(self.user_id)
        except Exception as e:
            return self._remote_failed("delete", e, local_saved, "Deleted locally only")
        return PersistenceResult(local_saved=local_saved, remote_saved=True)

    def _local_routine(self) -> Optional[dict]:
        if self.local is None:
            return None
        try:
            routine = self.local.get(ROUTINE_KEY)
        except (OSError, ValueError) as e:
            logger.warning("Local routine could not be read: %s", e)
            return None
        if routine is None:
            return None
        try:
            return WeeklyPlan.model_validate(routine).model_dump()
        except ValidationError as e:
            logger.warning("Ignoring unreadable local routine: %s", e)
            return None

    async def get_user_profile(self) -> Optional[UserProfile]:
        profile = None
        if self.user_id:
            try:
                profile = await self.store.fetch(self.user_id)
            except Exception as e:
                logger.warning("Cloud profile read failed for user %s: %s", self.user_id, e)

        if profile is not None and self.read_policy == "remote_only":
            return UserProfile(**profile)

        local_routine = self._local_routine()
        if local_routine and not (profile or {}).get("workout_routine"):
            if profile is None:
                profile = {}
            profile["workout_routine"] = local_routine
            if not profile.get("age"):
                profile["age"] = FALLBACK_AGE

            if self.read_policy == "write_back" and self.user_id:
                try:
                    await self.store.upsert(self.user_id, workout_routine=local_routine)
                    logger.info("Wrote local routine back to cloud for user %s", self.user_id)
                except Exception as e:
                    logger.warning("Routine write-back failed for user %s: %s", self.user_id, e)

        if profile is None:
            return None
        return UserProfile(**profile)

    async def save_onboarding_data(self, data: OnboardingData) -> PersistenceResult:
        local_saved = self._write_local(ONBOARDING_KEY, data.model_dump())
        warning = None if local_saved else self._local_warning()

        if not self.user_id:
            return PersistenceResult(local_saved=local_saved, warning=warning)

        try:
            await self.store.upsert(
                self.user_id,
                units=data.units,
                gender=data.gender,
                age=parse_leading_int(data.age) or 0,
                weight=parse_leading_float(data.weight) or 0,
                height=parse_leading_float(data.height) or 0,
                goal=data.goal,
            )
        except Exception as e:
            return self._remote_failed("save", e, local_saved, "Saved locally only")
        return PersistenceResult(local_saved=local_saved, remote_saved=True, warning=warning)

    async def save_user_plan(self, plan_id: str) -> PersistenceResult:
        # 로컬 대체 수단이 없으므로 로그인 필수, 실패는 그대로 전달
        if not self.user_id:
            raise NotAuthenticated("Sign in to choose a plan")
        try:
            await self.store.upsert(self.user_id, selected_plan=plan_id)
        except Exception as e:
            logger.error("Saving plan selection failed for user %s: %s", self.user_id, e)
            raise RemoteWriteFailed("Saving plan selection failed", detail=str(e)) from e
        return PersistenceResult(local_saved=False, remote_saved=True)
