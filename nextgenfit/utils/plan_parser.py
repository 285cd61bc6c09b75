# nextgenfit/utils/plan_parser.py
import json
import logging
import re

from pydantic import ValidationError

from nextgenfit.core.exceptions import InvalidPlanFormat, MalformedResponse
from nextgenfit.schemas.plan import DAYS_PER_WEEK, WEEKDAY_NAMES, WeeklyPlan

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    # 모델이 ```json ... ``` 으로 감싸서 주는 경우가 많음
    return _FENCE.sub("", text or "").strip()


def parse_response(raw_text: str):
    cleaned = strip_code_fences(raw_text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("JSON parse error: %s | raw text: %r", e, raw_text)
        raise MalformedResponse("Failed to parse AI response", raw_text=raw_text) from e


def days_from_array(parsed: list) -> list:
    return list(parsed)


def days_from_object(parsed: dict) -> list:
    return list(parsed["days"])


def extract_days(parsed) -> list:
    """Two accepted shapes: a bare array of days, or ``{"days": [...]}``."""
    if isinstance(parsed, list) and parsed:
        return days_from_array(parsed)
    if isinstance(parsed, dict) and isinstance(parsed.get("days"), list) and parsed["days"]:
        return days_from_object(parsed)
    logger.error("Unexpected plan structure: %r", parsed)
    raise InvalidPlanFormat("AI response is neither a list of days nor an object with 'days'", parsed=parsed)


def assign_day_names(days: list) -> list:
    named = []
    for i, day in enumerate(days):
        if not isinstance(day, dict):
            raise InvalidPlanFormat(f"Day {i} is not an object", parsed=days)
        named.append({**day, "day_name": WEEKDAY_NAMES[i % DAYS_PER_WEEK]})
    return named


def normalize_plan(raw_text: str) -> WeeklyPlan:
    days = assign_day_names(extract_days(parse_response(raw_text)))

    if len(days) != DAYS_PER_WEEK:
        logger.warning("Plan has %d days instead of %d", len(days), DAYS_PER_WEEK)

    try:
        return WeeklyPlan(days=days)
    except ValidationError as e:
        logger.error("Plan validation failed: %s", e)
        raise InvalidPlanFormat("AI response days have an invalid structure", parsed=days) from e
