import json
import logging
import math
import re
from typing import Any, List

from pydantic import ValidationError

from travelplanner.errors import InvalidShapeError, ParseError
from travelplanner.schemas.itinerary_schema import DayPlan, Itinerary

logger = logging.getLogger(__name__)

ALLOWED_INTENSITIES = ("Low", "Medium", "High")

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")
_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


# ------------------------------------------------------------
# Helper: Safely extract clean JSON from model output
# ------------------------------------------------------------
def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    cleaned = _FENCE_OPEN.sub("", cleaned)
    cleaned = _FENCE_CLOSE.sub("", cleaned)
    return cleaned.strip()


def extract_json(text: str) -> Any:
    """
    Parse the model output as JSON.
    Handles Markdown fences and pre/post commentary by falling back to the
    first {...} block.
    """
    if not text or not text.strip():
        raise ParseError("The AI returned an empty response.", raw=text)

    cleaned = strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    match = _JSON_BLOCK.search(cleaned)
    if match:
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError as e:
            logger.warning("JSON decoding failed: %s", e)

    logger.warning("No JSON block found in model output. First 400 chars: %s", text[:400])
    raise ParseError("Failed to parse the itinerary from AI response.", raw=text)


# ------------------------------------------------------------
# Day repair
# ------------------------------------------------------------
def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large for a float
        return False


def _round_cost(value: Any) -> int:
    if not _is_number(value):
        return 0
    # half-up, matching how the UI rounds
    return max(0, int(math.floor(value + 0.5)))


def _activity_text(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        for key in ("name", "title", "description"):
            if isinstance(item.get(key), str) and item[key]:
                return item[key]
        return json.dumps(item, ensure_ascii=False)
    return str(item)


def _repair_day(entry: Any, position: int) -> dict:
    if not isinstance(entry, dict):
        entry = {}

    day = entry.get("day")
    if not (_is_number(day) and day >= 1 and float(day).is_integer()):
        day = position
    day = int(day)

    title = entry.get("title")
    if not isinstance(title, str) or not title.strip():
        title = f"Day {day}"

    activities = entry.get("activities")
    if not isinstance(activities, list):
        activities = []

    intensity = entry.get("travelIntensity")
    if intensity not in ALLOWED_INTENSITIES:
        intensity = "Medium"

    return {
        "day": day,
        "title": title,
        "activities": [_activity_text(a) for a in activities if a is not None],
        "travelIntensity": intensity,
        "estimatedCost": _round_cost(entry.get("estimatedCost")),
    }


def _strict_day(entry: Any, position: int, raw: str) -> dict:
    try:
        return DayPlan.model_validate(entry).model_dump()
    except ValidationError as e:
        raise InvalidShapeError(f"Day entry {position} is invalid: {e.errors()[0]['msg']}", raw=raw)


# ------------------------------------------------------------
# Public entry point
# ------------------------------------------------------------
def normalize_itinerary(raw_text: str, strict: bool = False) -> Itinerary:
    """
    Turn raw model text into an Itinerary.

    The default mode repairs malformed day entries instead of rejecting them:
    missing day numbers come from the entry position, missing titles become
    "Day N", unknown intensities become "Medium" and costs are rounded
    integers. ``strict=True`` rejects any entry that needs repair.
    """
    data = extract_json(raw_text)

    if not isinstance(data, dict) or not isinstance(data.get("itinerary"), list):
        raise InvalidShapeError("Invalid itinerary format from AI: 'itinerary' must be a list.", raw=raw_text)

    days = []
    for idx, entry in enumerate(data["itinerary"], start=1):
        days.append(_strict_day(entry, idx, raw_text) if strict else _repair_day(entry, idx))

    breakdown = data.get("budgetBreakdown")
    raw_tips = data.get("tips")
    tips: List[str] = [str(t) for t in raw_tips if t is not None] if isinstance(raw_tips, list) else []

    try:
        return Itinerary.model_validate(
            {
                "itinerary": days,
                "budgetBreakdown": breakdown if isinstance(breakdown, dict) else None,
                "tips": tips,
            }
        )
    except ValidationError as e:
        raise InvalidShapeError(f"Invalid itinerary format from AI: {e.errors()[0]['msg']}", raw=raw_text)
