"""
Household Hub — Item materializer.

Turns classified schedule items into household records: applies the
per-kind defaults, converts loose date-time strings, and saves each record
through the RecordStore port.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.core.parser import (
    ParsedChore,
    ParsedEvent,
    ParsedGrocery,
    ParsedItem,
    ParsedMedication,
)
from src.data.models import (
    CalendarEvent,
    Chore,
    EventType,
    GroceryCategory,
    GroceryItem,
    Medication,
    User,
)

if TYPE_CHECKING:
    from src.ports.record_port import RecordStore

logger = logging.getLogger(__name__)

_LOCAL_DATETIME_FORMATS = (
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M",
)


@dataclass(frozen=True)
class ScheduleDefaults:
    """Fallback values applied when the model leaves a field out."""

    chore_points: int = 10
    chore_due_days: int = 1
    event_default_hour: int = 10
    event_duration: timedelta = timedelta(hours=1)
    medication_dosage: str = "As prescribed"
    medication_inventory: int = 30
    grocery_needed_by_days: int = 7


class ParsedItemSummary(BaseModel):
    """Echo of one saved item, returned to the caller (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: str
    title: str
    description: str | None = None
    date_time: str | None = None
    points: int | None = None


@dataclass
class MaterializedRecord:
    kind: str
    record: Chore | CalendarEvent | Medication | GroceryItem
    summary: ParsedItemSummary


# ---------------------------------------------------------------------------
# Date-time parsing
# ---------------------------------------------------------------------------

def parse_loose_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-ish date-time string from the model.

    Tries strict local date-time formats first, then datetime.fromisoformat
    (date-only, offsets, trailing Z). An offset-aware result keeps its wall
    clock and drops the offset. Returns None when nothing parses.
    """
    if value is None or not value.strip():
        return None

    text = value.strip()
    for fmt in _LOCAL_DATETIME_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.warning("Could not parse datetime: %s", value)
        return None
    return parsed.replace(tzinfo=None)


def _resolve_category(value: str | None) -> GroceryCategory:
    if value:
        try:
            return GroceryCategory[value.strip().upper()]
        except KeyError:
            pass
    return GroceryCategory.OTHER


# ---------------------------------------------------------------------------
# Builders (unsaved records)
# ---------------------------------------------------------------------------

def build_chore(item: ParsedChore, user: User, now: datetime, defaults: ScheduleDefaults) -> Chore:
    due_date = parse_loose_datetime(item.date_time)
    return Chore(
        title=item.title.strip(),
        description=item.description,
        due_date=due_date or now + timedelta(days=defaults.chore_due_days),
        points=item.points if item.points is not None else defaults.chore_points,
        completed=False,
        household_id=user.household_id,
        created_by=user.id,
        created_at=now,
        updated_at=now,
    )


def build_event(item: ParsedEvent, user: User, now: datetime, defaults: ScheduleDefaults) -> CalendarEvent:
    start_time = parse_loose_datetime(item.date_time)
    if start_time is None:
        start_time = (now + timedelta(days=1)).replace(
            hour=defaults.event_default_hour, minute=0, second=0, microsecond=0,
        )
    end_time = parse_loose_datetime(item.end_date_time) or start_time + defaults.event_duration

    return CalendarEvent(
        title=item.title.strip(),
        description=item.description,
        start_time=start_time,
        end_time=end_time,
        type=EventType.OTHER,
        participant_ids=[],
        household_id=user.household_id,
        created_by=user.id,
        created_at=now,
        updated_at=now,
    )


def build_medication(
    item: ParsedMedication, user: User, now: datetime, defaults: ScheduleDefaults,
) -> Medication:
    dosage = item.dosage if item.dosage and item.dosage.strip() else defaults.medication_dosage
    return Medication(
        name=item.title.strip(),
        dosage=dosage,
        instructions=item.description,
        morning="morning" in item.times,
        afternoon="afternoon" in item.times,
        evening="evening" in item.times,
        inventory=defaults.medication_inventory,
        household_id=user.household_id,
        created_at=now,
        updated_at=now,
    )


def build_grocery(item: ParsedGrocery, user: User, now: datetime, defaults: ScheduleDefaults) -> GroceryItem:
    return GroceryItem(
        name=item.title.strip(),
        category=_resolve_category(item.category),
        needed_by=now.date() + timedelta(days=defaults.grocery_needed_by_days),
        checked=False,
        added_by_id=user.id,
        household_id=user.household_id,
        created_at=now,
        updated_at=now,
    )


# ---------------------------------------------------------------------------
# Materializer
# ---------------------------------------------------------------------------

class Materializer:
    """Builds and saves one record per classified item.

    Persistence failures propagate as PersistenceError; the caller decides
    whether to skip the item.
    """

    def __init__(self, store: RecordStore, defaults: ScheduleDefaults | None = None) -> None:
        self._store = store
        self._defaults = defaults or ScheduleDefaults()

    def materialize(self, item: ParsedItem, user: User, now: datetime) -> MaterializedRecord:
        summary = ParsedItemSummary(
            type=item.raw_type,
            title=item.title,
            description=item.description,
            date_time=item.date_time,
        )

        if isinstance(item, ParsedChore):
            chore = self._store.create_chore(build_chore(item, user, now, self._defaults))
            summary.points = chore.points
            return MaterializedRecord(kind="chore", record=chore, summary=summary)
        if isinstance(item, ParsedEvent):
            event = self._store.create_event(build_event(item, user, now, self._defaults))
            return MaterializedRecord(kind="event", record=event, summary=summary)
        if isinstance(item, ParsedMedication):
            medication = self._store.create_medication(build_medication(item, user, now, self._defaults))
            return MaterializedRecord(kind="medication", record=medication, summary=summary)
        if isinstance(item, ParsedGrocery):
            grocery = self._store.create_grocery_item(build_grocery(item, user, now, self._defaults))
            return MaterializedRecord(kind="grocery", record=grocery, summary=summary)

        raise TypeError(f"Unsupported item: {type(item).__name__}")
