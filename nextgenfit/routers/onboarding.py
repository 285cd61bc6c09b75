# nextgenfit/routers/onboarding.py
from dataclasses import asdict
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from nextgenfit.crud.routine import RoutinePersistence
from nextgenfit.dependencies import get_persistence
from nextgenfit.schemas.plan import PlanSelection
from nextgenfit.schemas.user import OnboardingData
from nextgenfit.utils.onboarding import (
    OnboardingState,
    TOTAL_STEPS,
    is_complete,
    is_step_valid,
    transition,
)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


class OnboardingStep(BaseModel):
    state: dict = Field(default_factory=dict)
    action: Literal["update", "next", "back"] = "update"
    values: Optional[dict] = None


@router.post("/step")
async def onboarding_step(body: OnboardingStep):
    """위저드 한 단계 전이. 상태는 클라이언트가 들고 다닌다."""
    known = {k: v for k, v in body.state.items() if k in OnboardingState.__dataclass_fields__}
    try:
        known["step"] = int(known.get("step", 1))
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail="step must be an integer")
    state = OnboardingState(**known)
    if not 1 <= state.step <= TOTAL_STEPS:
        raise HTTPException(status_code=400, detail=f"step must be between 1 and {TOTAL_STEPS}")

    new_state = transition(state, body.action, body.values)
    return {
        "state": asdict(new_state),
        "step_valid": is_step_valid(new_state),
        "complete": is_complete(new_state),
    }


@router.post("")
async def submit_onboarding(data: OnboardingData, persistence: RoutinePersistence = Depends(get_persistence)):
    return await persistence.save_onboarding_data(data)


@router.post("/plan-selection")
async def select_plan(body: PlanSelection, persistence: RoutinePersistence = Depends(get_persistence)):
    return await persistence.save_user_plan(body.plan_id)
