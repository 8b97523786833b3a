"""Health check endpoint."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from src.api.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Report liveness and whether the AI assistant has an API key."""
    return HealthResponse(
        status="healthy",
        ai_configured=request.app.state.schedule_config.is_configured,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
