"""
Household Hub — Data Models.

Every record belongs to exactly one household. Records created by the AI
schedule assistant are ordinary records afterwards: the CRUD routes edit and
delete them like any other.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class UserRole(Enum):
    GUARDIAN = "GUARDIAN"
    MEMBER = "MEMBER"


class EventType(Enum):
    FAMILY = "FAMILY"
    SCHOOL = "SCHOOL"
    MEDICAL = "MEDICAL"
    OTHER = "OTHER"


class GroceryCategory(Enum):
    PRODUCE = "PRODUCE"
    DAIRY = "DAIRY"
    MEAT = "MEAT"
    PANTRY = "PANTRY"
    OTHER = "OTHER"


class DoseStatus(Enum):
    TAKEN = "TAKEN"
    SKIPPED = "SKIPPED"
    MISSED = "MISSED"


@dataclass
class Household:
    """The tenancy boundary. New members join with the invite code."""

    id: int
    name: str
    invite_code: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class User:
    """A household member. Guardians may use the AI schedule assistant."""

    id: int
    email: str
    name: str
    household_id: int
    role: UserRole = UserRole.MEMBER
    avatar: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_guardian(self) -> bool:
        return self.role is UserRole.GUARDIAN


@dataclass
class Chore:
    """A one-off household task worth some points once completed."""

    title: str
    due_date: datetime
    household_id: int
    created_by: int | None = None
    description: str | None = None
    points: int = 10
    completed: bool = False
    assigned_to_id: int | None = None
    start_time: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    id: int | None = None


@dataclass
class CalendarEvent:
    title: str
    start_time: datetime
    end_time: datetime
    household_id: int
    created_by: int | None = None
    description: str | None = None
    type: EventType = EventType.OTHER
    participant_ids: list[int] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    id: int | None = None


@dataclass
class Medication:
    """A medication with time-of-day flags and a remaining-doses counter."""

    name: str
    household_id: int
    dosage: str | None = None
    instructions: str | None = None
    morning: bool = False
    afternoon: bool = False
    evening: bool = False
    inventory: int = 0            # doses left; a TAKEN log decrements it
    assigned_to_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    id: int | None = None


@dataclass
class MedicationLog:
    medication_id: int
    user_id: int
    household_id: int
    status: DoseStatus
    scheduled_time: datetime
    taken_time: datetime | None = None
    notes: str | None = None
    created_at: datetime | None = None
    id: int | None = None


@dataclass
class GroceryItem:
    name: str
    household_id: int
    category: GroceryCategory = GroceryCategory.OTHER
    needed_by: date | None = None
    checked: bool = False
    added_by_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    id: int | None = None


@dataclass
class DeviceToken:
    """A push-notification token registered by one of a user's devices."""

    id: int
    user_id: int
    token: str
    platform: str = "ios"
    created_at: datetime | None = None
    updated_at: datetime | None = None
