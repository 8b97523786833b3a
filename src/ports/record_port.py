"""Record port: abstract interface for persisting household records.

Core modules depend on this protocol, never on a specific store.
"""

from __future__ import annotations

from typing import Protocol

from src.data.models import CalendarEvent, Chore, GroceryItem, Medication


class PersistenceError(Exception):
    """Raised when the store fails to save a record."""


class RecordStore(Protocol):
    """Household-scoped create operations used by the AI schedule assistant.

    Each method returns the persisted record (with its id).
    """

    def create_chore(self, chore: Chore) -> Chore: ...

    def create_event(self, event: CalendarEvent) -> CalendarEvent: ...

    def create_medication(self, medication: Medication) -> Medication: ...

    def create_grocery_item(self, item: GroceryItem) -> GroceryItem: ...
