"""
Household Hub — FastAPI application.

create_app wires the SQLite repositories, the record store and the AI
schedule service onto app.state; routers read them from there.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.adapters.sqlite_records import SQLiteRecordStore
from src.api.routes import (
    chores,
    events,
    groceries,
    health,
    households,
    medications,
    notifications,
    schedule,
    users,
)
from src.api.schemas import ErrorResponse
from src.core.schedule_service import ScheduleConfig, ScheduleService
from src.data.db import (
    ChoreDB,
    DeviceTokenDB,
    EventDB,
    GroceryDB,
    HouseholdDB,
    MedicationDB,
    UserDB,
)

logger = logging.getLogger(__name__)


def create_app(
    db_path: str | None = None,
    schedule_config: ScheduleConfig | None = None,
) -> FastAPI:
    """Build the API. Defaults come from src.config.settings."""
    if db_path is None or schedule_config is None:
        from src.config import settings
        db_path = db_path or settings.DATABASE_PATH
        schedule_config = schedule_config or ScheduleConfig.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = app.state
        state.households = HouseholdDB(db_path)
        state.users = UserDB(db_path)
        state.chores = ChoreDB(db_path)
        state.events = EventDB(db_path)
        state.medications = MedicationDB(db_path)
        state.groceries = GroceryDB(db_path)
        state.device_tokens = DeviceTokenDB(db_path)
        state.schedule_config = schedule_config

        store = SQLiteRecordStore(state.chores, state.events, state.medications, state.groceries)
        state.schedule_service = ScheduleService(store, schedule_config)

        logger.info(
            "Household Hub started (db=%s, ai_configured=%s)",
            db_path,
            schedule_config.is_configured,
        )
        yield
        logger.info("Household Hub shutting down")

    app = FastAPI(
        title="Household Hub API",
        description="Shared chores, calendar, medications and groceries, with an AI schedule assistant",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error").model_dump(),
        )

    for module in (health, schedule, households, users, chores, events, medications, groceries, notifications):
        app.include_router(module.router)

    return app


app = create_app()
