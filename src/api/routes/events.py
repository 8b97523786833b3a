"""Calendar event routes."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from src.api.dependencies import get_current_user, not_found
from src.api.schemas import EventOut, EventRequest
from src.data.models import CalendarEvent, User

router = APIRouter(prefix="/api/events", tags=["events"])

CurrentUser = Annotated[User, Depends(get_current_user)]


@router.get("", response_model=list[EventOut])
def list_events(
    request: Request,
    user: CurrentUser,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[EventOut]:
    """All household events, or only those starting in [start, end] when both are given."""
    events = request.app.state.events.list_by_household(user.household_id, start=start, end=end)
    return [EventOut.model_validate(e) for e in events]


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(body: EventRequest, request: Request, user: CurrentUser) -> EventOut:
    event = request.app.state.events.add_event(CalendarEvent(
        title=body.title,
        description=body.description,
        start_time=body.start_time,
        end_time=body.end_time,
        type=body.type,
        participant_ids=body.participant_ids,
        household_id=user.household_id,
        created_by=user.id,
    ))
    return EventOut.model_validate(event)


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: int, body: EventRequest, request: Request, user: CurrentUser,
) -> EventOut:
    events = request.app.state.events
    existing = events.get_event(event_id, user.household_id)
    if existing is None:
        raise not_found("Event")

    updated = events.update_event(replace(
        existing,
        title=body.title,
        description=body.description,
        start_time=body.start_time,
        end_time=body.end_time,
        type=body.type,
        participant_ids=body.participant_ids,
    ))
    return EventOut.model_validate(updated)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: int, request: Request, user: CurrentUser) -> Response:
    if not request.app.state.events.delete_event(event_id, user.household_id):
        raise not_found("Event")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
