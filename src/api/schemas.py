"""Pydantic request/response models for the HTTP API.

Field names are snake_case in Python and camelCase on the wire.
Response models are built straight from the src.data.models dataclasses.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator, model_validator
from pydantic.alias_generators import to_camel

from src.data.models import DoseStatus, EventType, GroceryCategory, UserRole

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class _Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------------------
# Households and users
# ---------------------------------------------------------------------------


class HouseholdOut(_Schema):
    id: int
    name: str
    invite_code: str


class UserOut(_Schema):
    id: int
    email: str
    name: str
    role: UserRole
    household_id: int
    avatar: str | None = None
    created_at: datetime | None = None


class CreateHouseholdRequest(_Schema):
    household_name: NonBlank
    name: NonBlank
    email: NonBlank


class JoinHouseholdRequest(_Schema):
    invite_code: NonBlank
    name: NonBlank
    email: NonBlank


class MembershipResponse(_Schema):
    household: HouseholdOut
    user: UserOut


class UpdateProfileRequest(_Schema):
    name: NonBlank | None = None
    avatar: str | None = None


class InviteCodeResponse(_Schema):
    invite_code: str


# ---------------------------------------------------------------------------
# Chores
# ---------------------------------------------------------------------------


class CreateChoreRequest(_Schema):
    title: NonBlank
    description: str | None = None
    assigned_to_id: int | None = None
    start_time: datetime | None = None
    due_date: datetime
    points: int = 10


class ChoreOut(_Schema):
    id: int
    title: str
    description: str | None = None
    due_date: datetime
    points: int
    completed: bool
    household_id: int
    created_by: int | None = None
    assigned_to_id: int | None = None
    start_time: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LeaderboardEntry(_Schema):
    user_id: int
    name: str
    points: int


# ---------------------------------------------------------------------------
# Calendar events
# ---------------------------------------------------------------------------


class EventRequest(_Schema):
    title: NonBlank
    description: str | None = None
    start_time: datetime
    end_time: datetime
    type: EventType = EventType.OTHER
    participant_ids: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_order(self) -> EventRequest:
        if self.end_time < self.start_time:
            raise ValueError("endTime must not be before startTime")
        return self


class EventOut(_Schema):
    id: int
    title: str
    description: str | None = None
    start_time: datetime
    end_time: datetime
    type: EventType
    participant_ids: list[int]
    household_id: int
    created_by: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Medications
# ---------------------------------------------------------------------------


class CreateMedicationRequest(_Schema):
    name: NonBlank
    dosage: str | None = None
    instructions: str | None = None
    morning: bool = False
    afternoon: bool = False
    evening: bool = False
    inventory: int = Field(ge=0)
    assigned_to_id: int | None = None


class MedicationOut(_Schema):
    id: int
    name: str
    dosage: str | None = None
    instructions: str | None = None
    morning: bool
    afternoon: bool
    evening: bool
    inventory: int
    household_id: int
    assigned_to_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LogDoseRequest(_Schema):
    medication_id: int
    status: DoseStatus
    scheduled_time: datetime
    taken_time: datetime | None = None
    notes: str | None = None


class DoseLogOut(_Schema):
    id: int
    medication_id: int
    user_id: int
    status: DoseStatus
    scheduled_time: datetime
    taken_time: datetime | None = None
    notes: str | None = None
    created_at: datetime | None = None


class InventoryUpdateRequest(_Schema):
    quantity: int = Field(ge=0)


# ---------------------------------------------------------------------------
# Groceries
# ---------------------------------------------------------------------------


class CreateGroceryRequest(_Schema):
    name: NonBlank
    category: GroceryCategory = GroceryCategory.OTHER
    needed_by: date | None = None


class GroceryOut(_Schema):
    id: int
    name: str
    category: GroceryCategory
    needed_by: date | None = None
    checked: bool
    added_by_id: int | None = None
    household_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Notifications, AI schedule, health
# ---------------------------------------------------------------------------


class RegisterDeviceRequest(_Schema):
    token: NonBlank
    platform: str = "ios"


class DeviceTokenOut(_Schema):
    id: int
    token: str
    platform: str
    created_at: datetime | None = None


class UnregisterDeviceRequest(_Schema):
    token: NonBlank


class ScheduleRequest(_Schema):
    text: str

    @field_validator("text")
    @classmethod
    def require_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Input text is required")
        return v


class HealthResponse(_Schema):
    status: str
    ai_configured: bool
    timestamp: str  # ISO 8601 UTC


class ErrorResponse(BaseModel):
    """Body of unexpected-error responses."""

    error: str
