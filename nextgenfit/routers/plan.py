# nextgenfit/routers/plan.py
import asyncio
import logging
from typing import Optional, Sequence

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse

from nextgenfit.core import config
from nextgenfit.crud.routine import RoutinePersistence
from nextgenfit.dependencies import get_generator, get_persistence
from nextgenfit.schemas.plan import (
    DayPlan,
    GeneratePlanRequest,
    GeneratePlanResponse,
    GenerationPreferences,
)
from nextgenfit.schemas.user import UserProfile
from nextgenfit.utils.llm_client import GenerateFn
from nextgenfit.utils.model_fallback import generate_with_fallback
from nextgenfit.utils.plan_parser import normalize_plan
from nextgenfit.utils.plan_prompt import build_plan_prompt

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/plans", tags=["plans"])


async def create_weekly_plan(
    persistence: RoutinePersistence,
    generate: GenerateFn,
    preferences: GenerationPreferences,
    profile: Optional[dict] = None,
    candidates: Optional[Sequence[str]] = None,
    timeout: Optional[float] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> GeneratePlanResponse:
    """프롬프트 생성 -> 모델 호출(fallback) -> 정규화 -> 저장."""
    if profile is None:
        stored = await persistence.get_user_profile()
        profile = stored.model_dump() if stored else {}

    prompt = build_plan_prompt(profile, preferences)
    outcome = await generate_with_fallback(
        prompt,
        candidates if candidates is not None else config.GENERATION_MODELS,
        generate,
        timeout=timeout if timeout is not None else config.GENERATION_TIMEOUT_SECONDS,
        cancel_event=cancel_event,
    )
    logger.info("AI response received from %s (length %d)", outcome.backend_id, len(outcome.text))

    plan = normalize_plan(outcome.text)
    persistence_result = await persistence.save_workout_routine(plan)
    return GeneratePlanResponse(plan=plan, model=outcome.backend_id, persistence=persistence_result)


async def cancel_on_disconnect(request: Request, cancel_event: asyncio.Event, interval: float = 0.1) -> None:
    """Sets ``cancel_event`` once the client goes away."""
    while not cancel_event.is_set():
        if await request.is_disconnected():
            logger.info("Client disconnected, cancelling plan generation")
            cancel_event.set()
            return
        await asyncio.sleep(interval)


def resolve_day(profile: Optional[UserProfile], day_index) -> Optional[DayPlan]:
    """Day by 0-based index (0 = Monday). None when there is no plan or the index is unusable."""
    try:
        index = int(day_index)
    except (TypeError, ValueError):
        return None
    if profile is None or profile.workout_routine is None:
        return None
    return profile.workout_routine.day(index)


@router.get("")
async def read_plan(persistence: RoutinePersistence = Depends(get_persistence)):
    profile = await persistence.get_user_profile()
    if profile is None:
        raise HTTPException(status_code=404, detail="No profile or plan found.")
    return profile


@router.post("/generate", response_model=GeneratePlanResponse)
async def generate_plan(
    body: GeneratePlanRequest,
    request: Request,
    persistence: RoutinePersistence = Depends(get_persistence),
    generate: GenerateFn = Depends(get_generator),
):
    cancel_event = asyncio.Event()
    watcher = asyncio.create_task(cancel_on_disconnect(request, cancel_event))
    try:
        return await create_weekly_plan(
            persistence, generate, body.preferences, profile=body.profile, cancel_event=cancel_event
        )
    finally:
        watcher.cancel()
        await asyncio.gather(watcher, return_exceptions=True)


@router.delete("")
async def delete_plan(persistence: RoutinePersistence = Depends(get_persistence)):
    return await persistence.delete_user_plan()


@router.get("/days/{day_index}")
async def read_day(day_index: str, persistence: RoutinePersistence = Depends(get_persistence)):
    day = resolve_day(await persistence.get_user_profile(), day_index)
    if day is None:
        # 잘못된 인덱스나 플랜이 없으면 기본 화면으로
        return RedirectResponse(url=config.DAY_DETAIL_FALLBACK_URL, status_code=307)
    return day
