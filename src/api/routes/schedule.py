"""AI schedule endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import require_guardian
from src.api.schemas import ScheduleRequest
from src.core.schedule_service import ScheduleResponse
from src.data.models import User

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/schedule", response_model=ScheduleResponse)
async def process_schedule(
    body: ScheduleRequest,
    request: Request,
    user: Annotated[User, Depends(require_guardian)],
) -> ScheduleResponse:
    """
    Turn free text into chores, events, medications and grocery items.

    Always 200 for an authenticated guardian: the outcome is reported in the
    response's message and outcome fields.
    """
    return await request.app.state.schedule_service.process_schedule_text(body.text, user)
