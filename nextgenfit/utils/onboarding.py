# nextgenfit/utils/onboarding.py
"""
Onboarding wizard as a pure state machine.

The state is immutable; every transition returns a new state and step validity is
a predicate over the state alone.

    state = OnboardingState()
    state = transition(state, "update", {"units": "metric"})
    state = transition(state, "next")
"""
import re
from dataclasses import dataclass, replace
from typing import Optional

from nextgenfit.schemas.user import OnboardingData

TOTAL_STEPS = 3
FIELDS = ("units", "gender", "age", "weight", "height", "goal")

# (min, max) per unit system; imperial height in inches
RANGES = {
    "age": {"metric": (10, 120), "imperial": (10, 120)},
    "height": {"metric": (50, 300), "imperial": (36, 108)},
    "weight": {"metric": (20, 500), "imperial": (40, 1100)},
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+))")


def parse_leading_int(value) -> Optional[int]:
    """'72kg' -> 72, '70.5' -> 70, 'abc' -> None."""
    match = _LEADING_INT.match(str(value or ""))
    return int(match.group(1)) if match else None


def parse_leading_float(value) -> Optional[float]:
    match = _LEADING_FLOAT.match(str(value or ""))
    return float(match.group(1)) if match else None


@dataclass(frozen=True)
class OnboardingState:
    step: int = 1
    units: str = "metric"
    gender: str = ""
    age: str = ""
    weight: str = ""
    height: str = ""
    goal: str = ""


def is_field_valid(state: OnboardingState, field: str) -> bool:
    value = getattr(state, field)
    if not value:
        return False
    if field not in RANGES:
        return True

    number = parse_leading_int(value)
    if number is None:
        return False
    low, high = RANGES[field]["imperial" if state.units == "imperial" else "metric"]
    return low <= number <= high


def is_step_valid(state: OnboardingState) -> bool:
    if state.step == 1:
        return bool(state.units)
    if state.step == 2:
        return all(is_field_valid(state, f) for f in ("age", "height", "weight")) and bool(state.gender)
    if state.step == 3:
        return bool(state.goal)
    return True


def is_complete(state: OnboardingState) -> bool:
    return state.step == TOTAL_STEPS and is_step_valid(state)


def transition(state: OnboardingState, action: str, values: Optional[dict] = None) -> OnboardingState:
    if action == "update":
        changes = {k: ("" if v is None else str(v)) for k, v in (values or {}).items() if k in FIELDS}
        return replace(state, **changes)
    if action == "next":
        if state.step < TOTAL_STEPS and is_step_valid(state):
            return replace(state, step=state.step + 1)
        return state
    if action == "back":
        return replace(state, step=max(1, state.step - 1))
    raise ValueError(f"unknown onboarding action: {action}")


def to_onboarding_data(state: OnboardingState) -> OnboardingData:
    return OnboardingData(**{f: getattr(state, f) for f in FIELDS})
