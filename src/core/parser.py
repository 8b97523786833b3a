"""
Household Hub — Schedule text parser.

Builds the system prompt for the AI schedule assistant, cleans and decodes the
model's JSON reply, and classifies each loosely-typed item into one of four
typed variants (chore, event, medication, grocery).

Malformed model output never raises: it decodes to an empty item list.
Items are validated exactly once, at classification time.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import date
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

TIME_SLOTS = ("morning", "afternoon", "evening")


class ItemValidationError(ValueError):
    """Raised when a parsed item cannot be materialized (missing fields, unknown type)."""


# ---------------------------------------------------------------------------
# Typed items, one variant per record kind
# ---------------------------------------------------------------------------


class _BaseItem(BaseModel):
    raw_type: str                  # "type" exactly as the model wrote it
    title: str
    description: str | None = None
    date_time: str | None = None   # raw "dateTime", parsed later


class ParsedChore(_BaseItem):
    """JSON example:
    {"type": "chore", "title": "Clean garage", "dateTime": "2025-03-10T09:00:00", "points": 15}
    """
    kind: Literal["chore"] = "chore"
    points: int | None = None


class ParsedEvent(_BaseItem):
    """JSON example:
    {"type": "event", "title": "Dentist", "dateTime": "2025-03-10T16:00:00",
     "endDateTime": "2025-03-10T17:00:00"}
    """
    kind: Literal["event"] = "event"
    end_date_time: str | None = None


class ParsedMedication(_BaseItem):
    """JSON example:
    {"type": "medication", "title": "Vitamin D", "dosage": "1 tablet", "times": ["morning"]}
    """
    kind: Literal["medication"] = "medication"
    dosage: str | None = None
    times: list[str] = Field(default_factory=list)


class ParsedGrocery(_BaseItem):
    """JSON example:
    {"type": "grocery", "title": "Milk", "category": "DAIRY"}
    """
    kind: Literal["grocery"] = "grocery"
    category: str | None = None


ParsedItem = Annotated[
    Union[ParsedChore, ParsedEvent, ParsedMedication, ParsedGrocery],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# System prompt for LLM
# ---------------------------------------------------------------------------

_SYSTEM_PROMPT = """\
You are a helpful family schedule assistant. Parse the user's free-form text and extract:
- Chores (tasks with due dates, assign points 5-20 based on difficulty)
- Calendar events (appointments, activities, family events)
- Medication reminders (medicine names, times to take them)
- Grocery items (things to buy, food items, household supplies)

Return a JSON array of items. Each item should have:
{{
    "type": "chore" | "event" | "medication" | "grocery",
    "title": "title of the item",
    "description": "optional description",
    "dateTime": "ISO datetime string (YYYY-MM-DDTHH:mm:ss) or null",
    "endDateTime": "for events only, ISO string or null",
    "points": number (for chores only, 5-20),
    "dosage": "for medications only",
    "times": ["morning", "afternoon", "evening"] (for medications),
    "category": "PRODUCE" | "DAIRY" | "MEAT" | "PANTRY" | "OTHER" (for groceries)
}}

If dates are relative like "tomorrow" or "next Monday", calculate from today's date.
Today is: {today}

Return ONLY valid JSON array, no markdown or explanation.
"""


def build_system_prompt(today: date) -> str:
    """Return the instruction prompt with `today` embedded as YYYY-MM-DD."""
    return _SYSTEM_PROMPT.format(today=today.isoformat())


# ---------------------------------------------------------------------------
# Response cleaning and decoding
# ---------------------------------------------------------------------------

def clean_llm_response(raw_text: str) -> str:
    """Remove markdown code block delimiters from the LLM's raw response."""
    cleaned_text = raw_text.strip()
    if cleaned_text.startswith("```json"):
        cleaned_text = cleaned_text.removeprefix("```json")
    elif cleaned_text.startswith("```"):
        cleaned_text = cleaned_text.removeprefix("```")
    if cleaned_text.endswith("```"):
        cleaned_text = cleaned_text.removesuffix("```")
    return cleaned_text.strip()


def parse_items(raw_text: str | None) -> list[dict[str, Any]]:
    """Decode the model reply into a list of raw item dicts.

    Returns [] for blank, null, or malformed output.
    """
    if not raw_text or not raw_text.strip():
        return []

    cleaned = clean_llm_response(raw_text)
    if cleaned in ("", "null", "[]"):
        return []

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse AI response as JSON: %s — raw: '%s'", exc, raw_text)
        return []

    # A single object instead of an array
    if isinstance(data, dict):
        data = [data]

    if not isinstance(data, list):
        logger.warning("AI returned unexpected type: %s", type(data).__name__)
        return []

    items: list[dict[str, Any]] = []
    for element in data:
        if not isinstance(element, dict):
            logger.warning("Skipping non-object item in array: %r", element)
            continue
        items.append(element)
    return items


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def _text(data: dict[str, Any], key: str) -> str | None:
    """Return a string field, or None when absent or not a string."""
    value = data.get(key)
    return value if isinstance(value, str) else None


def _points(value: Any) -> int | None:
    # bool is an int subclass but never a point count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def _times(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [t.strip().lower() for t in value if isinstance(t, str)]


def classify_item(data: dict[str, Any]) -> ParsedItem:
    """Validate a raw item and convert it into its typed variant.

    Raises ItemValidationError when type or title is missing/blank, or when
    the type is not one of chore/event/medication/grocery.
    """
    raw_type = _text(data, "type")
    if raw_type is None or not raw_type.strip():
        raise ItemValidationError(f"Item with missing type: {data}")

    title = _text(data, "title")
    if title is None or not title.strip():
        raise ItemValidationError(f"Item with missing title: {data}")

    common = {
        "raw_type": raw_type,
        "title": title,
        "description": _text(data, "description"),
        "date_time": _text(data, "dateTime"),
    }

    kind = raw_type.strip().lower()
    if kind == "chore":
        return ParsedChore(**common, points=_points(data.get("points")))
    if kind == "event":
        return ParsedEvent(**common, end_date_time=_text(data, "endDateTime"))
    if kind == "medication":
        return ParsedMedication(**common, dosage=_text(data, "dosage"), times=_times(data.get("times")))
    if kind == "grocery":
        return ParsedGrocery(**common, category=_text(data, "category"))

    raise ItemValidationError(f"Unknown item type: '{raw_type}'")
