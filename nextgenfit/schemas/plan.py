# nextgenfit/schemas/plan.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Literal, Optional, List

WEEKDAY_NAMES = ["Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag"]
DAYS_PER_WEEK = len(WEEKDAY_NAMES)

SessionDuration = Literal["30 min", "45 min", "60 min", "75 min", "90 min"]


class Exercise(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    sets: str = ""
    reps: str = ""
    notes: Optional[str] = None

    @field_validator("sets", "reps", mode="before")
    @classmethod
    def _stringify(cls, value):
        # 모델이 3, 10 같은 숫자로 주는 경우가 있음
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class DayPlan(BaseModel):
    model_config = ConfigDict(extra="allow")

    day_name: str
    title: str = ""
    desc: str = ""
    exercises: List[Exercise] = Field(default_factory=list)

    @field_validator("exercises", mode="before")
    @classmethod
    def _none_is_rest_day(cls, value):
        return [] if value is None else value


class WeeklyPlan(BaseModel):
    days: List[DayPlan]

    @property
    def is_complete_week(self) -> bool:
        return len(self.days) == DAYS_PER_WEEK

    def day(self, index: int) -> Optional[DayPlan]:
        if 0 <= index < len(self.days):
            return self.days[index]
        return None


class GenerationPreferences(BaseModel):
    training_days: int = Field(default=3, ge=1, le=7)
    session_duration: SessionDuration = "60 min"
    extra_constraints: str = Field(default="", max_length=100)


class PersistenceResult(BaseModel):
    """Outcome of a local + remote write. ``remote_saved`` is None when no remote write was attempted."""
    success: bool = True
    local_saved: bool
    remote_saved: Optional[bool] = None
    warning: Optional[str] = None


class GeneratePlanRequest(BaseModel):
    preferences: GenerationPreferences = Field(default_factory=GenerationPreferences)
    # 비로그인 사용자는 온보딩 값을 직접 넘길 수 있음
    profile: Optional[dict] = None


class GeneratePlanResponse(BaseModel):
    success: bool = True
    plan: WeeklyPlan
    model: str
    persistence: PersistenceResult


class PlanSelection(BaseModel):
    plan_id: str
