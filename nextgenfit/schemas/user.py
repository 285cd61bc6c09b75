# nextgenfit/schemas/user.py
from pydantic import BaseModel
from typing import Literal, Optional

from nextgenfit.schemas.plan import WeeklyPlan


class UserSignup(BaseModel):
    user_id: str


class UserLogin(BaseModel):
    user_id: str


class OnboardingData(BaseModel):
    """Onboarding form values exactly as entered (strings, like the form inputs)."""
    units: Literal["metric", "imperial"] = "metric"
    gender: str = ""
    age: str = ""
    weight: str = ""
    height: str = ""
    goal: str = ""


class UserProfile(BaseModel):
    user_id: Optional[str] = None
    units: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    goal: Optional[str] = None
    workout_routine: Optional[WeeklyPlan] = None
    selected_plan: Optional[str] = None
