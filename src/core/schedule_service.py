"""
Household Hub — AI Schedule Service.

Stateless service behind the AI schedule assistant:
free text -> system prompt -> chat completion -> parsed items ->
per-item materialize-or-skip -> aggregated response.

Every failure is contained here. Each pipeline stage reports a
ScheduleOutcome, and OUTCOME_MESSAGES maps it to the user-facing text in one
place; no exception escapes process_schedule_text.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Callable

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.core import llm
from src.core.llm import UpstreamError
from src.core.materializer import Materializer, ParsedItemSummary, ScheduleDefaults
from src.core.parser import ItemValidationError, build_system_prompt, classify_item, parse_items
from src.ports.record_port import PersistenceError

if TYPE_CHECKING:
    from src.config import Settings
    from src.data.models import User
    from src.ports.record_port import RecordStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ScheduleConfig(BaseModel):
    """Everything the pipeline needs besides the store and the caller."""

    api_key: str = ""
    api_url: str = llm.DEFAULT_API_URL
    model: str = llm.DEFAULT_MODEL
    temperature: float = llm.DEFAULT_TEMPERATURE
    max_tokens: int = llm.DEFAULT_MAX_TOKENS
    timeout_seconds: float = llm.DEFAULT_TIMEOUT_SECONDS
    defaults: ScheduleDefaults = Field(default_factory=ScheduleDefaults)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @classmethod
    def from_settings(cls, settings: Settings) -> ScheduleConfig:
        return cls(
            api_key=settings.OPENAI_API_KEY,
            api_url=settings.OPENAI_API_URL,
            model=settings.AI_MODEL,
            temperature=settings.AI_TEMPERATURE,
            max_tokens=settings.AI_MAX_TOKENS,
            timeout_seconds=settings.AI_TIMEOUT_SECONDS,
        )


# ---------------------------------------------------------------------------
# Response types
# ---------------------------------------------------------------------------


class ScheduleOutcome(Enum):
    SUCCESS = "success"
    NOT_CONFIGURED = "not_configured"
    NO_RESPONSE = "no_response"
    NO_ITEMS = "no_items"
    NOTHING_SAVED = "nothing_saved"
    FAILED = "failed"


OUTCOME_MESSAGES: dict[ScheduleOutcome, str] = {
    ScheduleOutcome.SUCCESS: "Successfully processed your schedule!",
    ScheduleOutcome.NOT_CONFIGURED: (
        "AI feature requires OpenAI API key. "
        "Please configure OPENAI_API_KEY in your environment."
    ),
    ScheduleOutcome.NO_RESPONSE: "Could not get a response from AI. Please try again.",
    ScheduleOutcome.NO_ITEMS: (
        "I couldn't identify any tasks, events, medications, or grocery items "
        "in your message. Please try being more specific."
    ),
    ScheduleOutcome.NOTHING_SAVED: (
        "I understood your message but couldn't save any items. Please try again."
    ),
    ScheduleOutcome.FAILED: (
        "Sorry, I couldn't understand that. Please try again with clearer details."
    ),
}


class ScheduleResponse(BaseModel):
    """Outcome of one request. Counters only count persisted records."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    outcome: ScheduleOutcome
    items: list[ParsedItemSummary] = Field(default_factory=list)
    chores_created: int = 0
    events_created: int = 0
    medications_created: int = 0
    groceries_created: int = 0

    @classmethod
    def for_outcome(cls, outcome: ScheduleOutcome) -> ScheduleResponse:
        """A response carrying only the outcome's fixed message."""
        return cls(message=OUTCOME_MESSAGES[outcome], outcome=outcome)


_COUNTER_FIELDS = {
    "chore": "chores_created",
    "event": "events_created",
    "medication": "medications_created",
    "grocery": "groceries_created",
}


# ---------------------------------------------------------------------------
# ScheduleService
# ---------------------------------------------------------------------------


class ScheduleService:
    """Turns free text into household records for one caller.

    Returns a ScheduleResponse in every case, never raises.
    """

    def __init__(
        self,
        store: RecordStore,
        config: ScheduleConfig,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._config = config
        self._materializer = Materializer(store, config.defaults)
        self._now = now

    async def process_schedule_text(self, text: str, user: User) -> ScheduleResponse:
        """Interpret `text` and save what it describes into the caller's household."""
        if not self._config.is_configured:
            logger.info("AI schedule requested but no API key is configured")
            return ScheduleResponse.for_outcome(ScheduleOutcome.NOT_CONFIGURED)

        try:
            return await self._run(text, user)
        except Exception:
            logger.exception("Error processing schedule text")
            return ScheduleResponse.for_outcome(ScheduleOutcome.FAILED)

    async def _run(self, text: str, user: User) -> ScheduleResponse:
        now = self._now()

        try:
            reply = await self._ask_model(text, now)
        except UpstreamError as exc:
            logger.error("AI schedule upstream failure (status=%s): %s", exc.status_code, exc.body)
            return ScheduleResponse.for_outcome(ScheduleOutcome.NO_RESPONSE)

        if not reply or not reply.strip():
            logger.warning("AI returned an empty reply")
            return ScheduleResponse.for_outcome(ScheduleOutcome.NO_RESPONSE)

        raw_items = parse_items(reply)
        if not raw_items:
            logger.info("No items found in message: %s", text[:80])
            return ScheduleResponse.for_outcome(ScheduleOutcome.NO_ITEMS)

        response = ScheduleResponse.for_outcome(ScheduleOutcome.SUCCESS)
        for raw in raw_items:
            try:
                item = classify_item(raw)
            except ItemValidationError as exc:
                logger.warning("Skipping item: %s", exc)
                continue

            # Repository calls are blocking; keep them off the event loop.
            try:
                saved = await asyncio.to_thread(self._materializer.materialize, item, user, now)
            except PersistenceError as exc:
                logger.error("Error saving item %s: %s", raw, exc)
                continue
            except Exception:
                # One bad item never costs the rest of the batch.
                logger.exception("Unexpected error materializing item %s", raw)
                continue

            response.items.append(saved.summary)
            field_name = _COUNTER_FIELDS[saved.kind]
            setattr(response, field_name, getattr(response, field_name) + 1)

        if not response.items:
            return ScheduleResponse.for_outcome(ScheduleOutcome.NOTHING_SAVED)

        logger.info(
            "AI schedule for household %s: %d chores, %d events, %d medications, %d groceries",
            user.household_id,
            response.chores_created,
            response.events_created,
            response.medications_created,
            response.groceries_created,
        )
        return response

    async def _ask_model(self, text: str, now: datetime) -> str:
        return await llm.complete(
            system=build_system_prompt(now.date()),
            user_message=text,
            api_key=self._config.api_key,
            base_url=self._config.api_url,
            model=self._config.model,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
            timeout=self._config.timeout_seconds,
        )
