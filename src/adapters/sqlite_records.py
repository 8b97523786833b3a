"""SQLite record adapter: implements RecordStore over the src.data.db repositories.

Database errors are re-raised as PersistenceError so core modules never see
sqlite3 exceptions.
"""

from __future__ import annotations

import logging
import sqlite3

from src.data.db import ChoreDB, EventDB, GroceryDB, MedicationDB
from src.data.models import CalendarEvent, Chore, GroceryItem, Medication
from src.ports.record_port import PersistenceError

logger = logging.getLogger(__name__)


class SQLiteRecordStore:
    """SQLite implementation of RecordStore."""

    def __init__(
        self,
        chore_db: ChoreDB,
        event_db: EventDB,
        medication_db: MedicationDB,
        grocery_db: GroceryDB,
    ) -> None:
        self._chores = chore_db
        self._events = event_db
        self._medications = medication_db
        self._groceries = grocery_db

    def create_chore(self, chore: Chore) -> Chore:
        try:
            return self._chores.add_chore(chore)
        except (sqlite3.Error, OverflowError) as exc:
            raise PersistenceError(f"Could not save chore '{chore.title}': {exc}") from exc

    def create_event(self, event: CalendarEvent) -> CalendarEvent:
        try:
            return self._events.add_event(event)
        except (sqlite3.Error, OverflowError) as exc:
            raise PersistenceError(f"Could not save event '{event.title}': {exc}") from exc

    def create_medication(self, medication: Medication) -> Medication:
        try:
            return self._medications.add_medication(medication)
        except (sqlite3.Error, OverflowError) as exc:
            raise PersistenceError(f"Could not save medication '{medication.name}': {exc}") from exc

    def create_grocery_item(self, item: GroceryItem) -> GroceryItem:
        try:
            return self._groceries.add_item(item)
        except (sqlite3.Error, OverflowError) as exc:
            raise PersistenceError(f"Could not save grocery item '{item.name}': {exc}") from exc
