"""
Household Hub — SQLite storage.

One repository class per collection, all sharing a single SQLite file.
Every record query is scoped to a household: an id that belongs to another
household behaves exactly like an id that does not exist.
"""

from __future__ import annotations

import json
import logging
import secrets
import sqlite3
import string
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path

from src.data.models import (
    CalendarEvent,
    Chore,
    DeviceToken,
    DoseStatus,
    EventType,
    GroceryCategory,
    GroceryItem,
    Household,
    Medication,
    MedicationLog,
    User,
    UserRole,
)

logger = logging.getLogger(__name__)

_INVITE_ALPHABET = string.ascii_uppercase + string.digits
_INVITE_CODE_LENGTH = 8


def _to_iso(value: datetime | date | None) -> str | None:
    return value.isoformat() if value is not None else None


def _to_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _to_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


class _SQLiteDB:
    """Connection handling shared by every repository."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from src.config import settings
            db_path = settings.DATABASE_PATH

        self._db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        raise NotImplementedError


class HouseholdDB(_SQLiteDB):
    """Households and their invite codes."""

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS households (
                    id          INTEGER PRIMARY KEY AUTOINCREMENT,
                    name        TEXT NOT NULL,
                    invite_code TEXT NOT NULL UNIQUE,
                    created_at  TEXT NOT NULL,
                    updated_at  TEXT NOT NULL
                )
            """)
        logger.debug("Households table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_household(row: sqlite3.Row) -> Household:
        return Household(
            id=row["id"],
            name=row["name"],
            invite_code=row["invite_code"],
            created_at=_to_datetime(row["created_at"]),
            updated_at=_to_datetime(row["updated_at"]),
        )

    @staticmethod
    def _new_invite_code() -> str:
        return "".join(secrets.choice(_INVITE_ALPHABET) for _ in range(_INVITE_CODE_LENGTH))

    def create_household(self, name: str) -> Household:
        """Insert a new household with a fresh invite code."""
        now = datetime.now()
        invite_code = self._new_invite_code()
        with self._connect() as conn:
            while conn.execute(
                "SELECT 1 FROM households WHERE invite_code = ?", (invite_code,)
            ).fetchone():
                invite_code = self._new_invite_code()
            cursor = conn.execute(
                "INSERT INTO households (name, invite_code, created_at, updated_at) VALUES (?, ?, ?, ?)",
                (name, invite_code, now.isoformat(), now.isoformat()),
            )
            household_id = cursor.lastrowid

        logger.info("Household created: #%d '%s'", household_id, name)
        return Household(
            id=household_id,
            name=name,
            invite_code=invite_code,
            created_at=now,
            updated_at=now,
        )

    def get_household(self, household_id: int) -> Household | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM households WHERE id = ?", (household_id,)
            ).fetchone()
        return self._row_to_household(row) if row else None

    def find_by_invite_code(self, invite_code: str) -> Household | None:
        """Case-insensitive lookup of a household by its invite code."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM households WHERE invite_code = ?",
                (invite_code.strip().upper(),),
            ).fetchone()
        return self._row_to_household(row) if row else None


class UserDB(_SQLiteDB):
    """Household members."""

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id           INTEGER PRIMARY KEY AUTOINCREMENT,
                    email        TEXT NOT NULL UNIQUE,
                    name         TEXT NOT NULL,
                    role         TEXT NOT NULL DEFAULT 'MEMBER',
                    household_id INTEGER NOT NULL,
                    avatar       TEXT,
                    created_at   TEXT NOT NULL,
                    updated_at   TEXT NOT NULL
                )
            """)
        logger.debug("Users table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            name=row["name"],
            role=UserRole(row["role"]),
            household_id=row["household_id"],
            avatar=row["avatar"],
            created_at=_to_datetime(row["created_at"]),
            updated_at=_to_datetime(row["updated_at"]),
        )

    def add_user(
        self,
        email: str,
        name: str,
        household_id: int,
        role: UserRole = UserRole.MEMBER,
    ) -> User:
        """Register a user in a household. Raises ValueError on a duplicate email."""
        now = datetime.now()
        email = email.strip().lower()
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO users (email, name, role, household_id, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (email, name, role.value, household_id, now.isoformat(), now.isoformat()),
                )
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            raise ValueError(f"Email {email} is already registered") from exc

        logger.info("User registered: #%d '%s' in household %d", user_id, name, household_id)
        return User(
            id=user_id,
            email=email,
            name=name,
            role=role,
            household_id=household_id,
            created_at=now,
            updated_at=now,
        )

    def get_user(self, user_id: int) -> User | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return self._row_to_user(row) if row else None

    def find_by_email(self, email: str) -> User | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ?", (email.strip().lower(),)
            ).fetchone()
        return self._row_to_user(row) if row else None

    def list_by_household(self, household_id: int) -> list[User]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM users WHERE household_id = ? ORDER BY created_at, id",
                (household_id,),
            ).fetchall()
        return [self._row_to_user(r) for r in rows]

    def update_profile(
        self, user_id: int, name: str | None = None, avatar: str | None = None,
    ) -> User:
        """Update name and/or avatar; None leaves a field unchanged."""
        user = self.get_user(user_id)
        if user is None:
            raise ValueError(f"User {user_id} not found")

        user.name = name if name is not None else user.name
        user.avatar = avatar if avatar is not None else user.avatar
        user.updated_at = datetime.now()
        with self._connect() as conn:
            conn.execute(
                "UPDATE users SET name = ?, avatar = ?, updated_at = ? WHERE id = ?",
                (user.name, user.avatar, user.updated_at.isoformat(), user_id),
            )
        return user


class ChoreDB(_SQLiteDB):
    """Household chores and the points leaderboard."""

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS chores (
                    id             INTEGER PRIMARY KEY AUTOINCREMENT,
                    title          TEXT    NOT NULL,
                    description    TEXT,
                    due_date       TEXT    NOT NULL,
                    points         INTEGER NOT NULL DEFAULT 10,
                    completed      INTEGER NOT NULL DEFAULT 0,
                    household_id   INTEGER NOT NULL,
                    created_by     INTEGER,
                    assigned_to_id INTEGER,
                    start_time     TEXT,
                    completed_at   TEXT,
                    created_at     TEXT    NOT NULL,
                    updated_at     TEXT    NOT NULL
                )
            """)
        logger.debug("Chores table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_chore(row: sqlite3.Row) -> Chore:
        return Chore(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            due_date=_to_datetime(row["due_date"]),
            points=row["points"],
            completed=bool(row["completed"]),
            household_id=row["household_id"],
            created_by=row["created_by"],
            assigned_to_id=row["assigned_to_id"],
            start_time=_to_datetime(row["start_time"]),
            completed_at=_to_datetime(row["completed_at"]),
            created_at=_to_datetime(row["created_at"]),
            updated_at=_to_datetime(row["updated_at"]),
        )

    def add_chore(self, chore: Chore) -> Chore:
        """Insert a chore and return it with its new id."""
        now = datetime.now()
        created_at = chore.created_at or now
        updated_at = chore.updated_at or now
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO chores
                    (title, description, due_date, points, completed, household_id,
                     created_by, assigned_to_id, start_time, completed_at,
                     created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    chore.title, chore.description, _to_iso(chore.due_date),
                    chore.points, int(chore.completed), chore.household_id,
                    chore.created_by, chore.assigned_to_id, _to_iso(chore.start_time),
                    _to_iso(chore.completed_at), created_at.isoformat(), updated_at.isoformat(),
                ),
            )
            chore_id = cursor.lastrowid

        logger.info("Chore added: #%d '%s' (%d points)", chore_id, chore.title, chore.points)
        return replace(chore, id=chore_id, created_at=created_at, updated_at=updated_at)

    def get_chore(self, chore_id: int, household_id: int) -> Chore | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM chores WHERE id = ? AND household_id = ?",
                (chore_id, household_id),
            ).fetchone()
        return self._row_to_chore(row) if row else None

    def list_by_household(
        self, household_id: int, completed: bool | None = None,
    ) -> list[Chore]:
        """List a household's chores, optionally filtered by completion."""
        query = "SELECT * FROM chores WHERE household_id = ?"
        params: list = [household_id]
        if completed is not None:
            query += " AND completed = ?"
            params.append(int(completed))
        query += " ORDER BY due_date, id"

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_chore(r) for r in rows]

    def complete_chore(self, chore_id: int, household_id: int) -> Chore:
        """Mark a chore completed now. Raises ValueError if not found."""
        chore = self.get_chore(chore_id, household_id)
        if chore is None:
            raise ValueError(f"Chore {chore_id} not found")

        now = datetime.now()
        with self._connect() as conn:
            conn.execute(
                "UPDATE chores SET completed = 1, completed_at = ?, updated_at = ? WHERE id = ?",
                (now.isoformat(), now.isoformat(), chore_id),
            )
        logger.info("Chore #%d '%s' completed", chore_id, chore.title)
        return replace(chore, completed=True, completed_at=now, updated_at=now)

    def delete_chore(self, chore_id: int, household_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM chores WHERE id = ? AND household_id = ?",
                (chore_id, household_id),
            )
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info("Chore #%d deleted", chore_id)
        return deleted

    def leaderboard(self, household_id: int) -> dict[int, int]:
        """Sum of points of completed chores per assignee (unassigned chores excluded)."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT assigned_to_id, SUM(points) AS total
                FROM chores
                WHERE household_id = ? AND completed = 1 AND assigned_to_id IS NOT NULL
                GROUP BY assigned_to_id
                ORDER BY total DESC
                """,
                (household_id,),
            ).fetchall()
        return {row["assigned_to_id"]: row["total"] for row in rows}


class EventDB(_SQLiteDB):
    """Household calendar events."""

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS calendar_events (
                    id              INTEGER PRIMARY KEY AUTOINCREMENT,
                    title           TEXT NOT NULL,
                    description     TEXT,
                    start_time      TEXT NOT NULL,
                    end_time        TEXT NOT NULL,
                    type            TEXT NOT NULL DEFAULT 'OTHER',
                    participant_ids TEXT NOT NULL DEFAULT '[]',
                    household_id    INTEGER NOT NULL,
                    created_by      INTEGER,
                    created_at      TEXT NOT NULL,
                    updated_at      TEXT NOT NULL
                )
            """)
        logger.debug("Calendar events table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_event(row: sqlite3.Row) -> CalendarEvent:
        return CalendarEvent(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            start_time=_to_datetime(row["start_time"]),
            end_time=_to_datetime(row["end_time"]),
            type=EventType(row["type"]),
            participant_ids=json.loads(row["participant_ids"]),
            household_id=row["household_id"],
            created_by=row["created_by"],
            created_at=_to_datetime(row["created_at"]),
            updated_at=_to_datetime(row["updated_at"]),
        )

    def add_event(self, event: CalendarEvent) -> CalendarEvent:
        now = datetime.now()
        created_at = event.created_at or now
        updated_at = event.updated_at or now
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO calendar_events
                    (title, description, start_time, end_time, type, participant_ids,
                     household_id, created_by, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    event.title, event.description, _to_iso(event.start_time),
                    _to_iso(event.end_time), event.type.value,
                    json.dumps(list(event.participant_ids)), event.household_id,
                    event.created_by, created_at.isoformat(), updated_at.isoformat(),
                ),
            )
            event_id = cursor.lastrowid

        logger.info("Event added: #%d '%s' at %s", event_id, event.title, event.start_time)
        return replace(event, id=event_id, created_at=created_at, updated_at=updated_at)

    def get_event(self, event_id: int, household_id: int) -> CalendarEvent | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM calendar_events WHERE id = ? AND household_id = ?",
                (event_id, household_id),
            ).fetchone()
        return self._row_to_event(row) if row else None

    def list_by_household(
        self,
        household_id: int,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[CalendarEvent]:
        """List events; when both bounds are given, only those starting within them."""
        query = "SELECT * FROM calendar_events WHERE household_id = ?"
        params: list = [household_id]
        if start is not None and end is not None:
            query += " AND start_time BETWEEN ? AND ?"
            params.extend([start.isoformat(), end.isoformat()])
        query += " ORDER BY start_time, id"

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_event(r) for r in rows]

    def update_event(self, event: CalendarEvent) -> CalendarEvent:
        """Overwrite an existing event's editable fields. Raises ValueError if not found."""
        if event.id is None or self.get_event(event.id, event.household_id) is None:
            raise ValueError(f"Event {event.id} not found")

        now = datetime.now()
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE calendar_events
                SET title = ?, description = ?, start_time = ?, end_time = ?,
                    type = ?, participant_ids = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    event.title, event.description, _to_iso(event.start_time),
                    _to_iso(event.end_time), event.type.value,
                    json.dumps(list(event.participant_ids)), now.isoformat(), event.id,
                ),
            )
        return self.get_event(event.id, event.household_id)

    def delete_event(self, event_id: int, household_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM calendar_events WHERE id = ? AND household_id = ?",
                (event_id, household_id),
            )
        return cursor.rowcount > 0


class MedicationDB(_SQLiteDB):
    """Medications and their dose logs."""

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS medications (
                    id             INTEGER PRIMARY KEY AUTOINCREMENT,
                    name           TEXT    NOT NULL,
                    dosage         TEXT,
                    instructions   TEXT,
                    morning        INTEGER NOT NULL DEFAULT 0,
                    afternoon      INTEGER NOT NULL DEFAULT 0,
                    evening        INTEGER NOT NULL DEFAULT 0,
                    inventory      INTEGER NOT NULL DEFAULT 0,
                    household_id   INTEGER NOT NULL,
                    assigned_to_id INTEGER,
                    created_at     TEXT    NOT NULL,
                    updated_at     TEXT    NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS medication_logs (
                    id             INTEGER PRIMARY KEY AUTOINCREMENT,
                    medication_id  INTEGER NOT NULL,
                    user_id        INTEGER NOT NULL,
                    household_id   INTEGER NOT NULL,
                    status         TEXT    NOT NULL,
                    scheduled_time TEXT    NOT NULL,
                    taken_time     TEXT,
                    notes          TEXT,
                    created_at     TEXT    NOT NULL
                )
            """)
        logger.debug("Medication tables initialized at %s", self._db_path)

    @staticmethod
    def _row_to_medication(row: sqlite3.Row) -> Medication:
        return Medication(
            id=row["id"],
            name=row["name"],
            dosage=row["dosage"],
            instructions=row["instructions"],
            morning=bool(row["morning"]),
            afternoon=bool(row["afternoon"]),
            evening=bool(row["evening"]),
            inventory=row["inventory"],
            household_id=row["household_id"],
            assigned_to_id=row["assigned_to_id"],
            created_at=_to_datetime(row["created_at"]),
            updated_at=_to_datetime(row["updated_at"]),
        )

    @staticmethod
    def _row_to_log(row: sqlite3.Row) -> MedicationLog:
        return MedicationLog(
            id=row["id"],
            medication_id=row["medication_id"],
            user_id=row["user_id"],
            household_id=row["household_id"],
            status=DoseStatus(row["status"]),
            scheduled_time=_to_datetime(row["scheduled_time"]),
            taken_time=_to_datetime(row["taken_time"]),
            notes=row["notes"],
            created_at=_to_datetime(row["created_at"]),
        )

    def add_medication(self, medication: Medication) -> Medication:
        now = datetime.now()
        created_at = medication.created_at or now
        updated_at = medication.updated_at or now
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO medications
                    (name, dosage, instructions, morning, afternoon, evening, inventory,
                     household_id, assigned_to_id, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    medication.name, medication.dosage, medication.instructions,
                    int(medication.morning), int(medication.afternoon), int(medication.evening),
                    medication.inventory, medication.household_id, medication.assigned_to_id,
                    created_at.isoformat(), updated_at.isoformat(),
                ),
            )
            medication_id = cursor.lastrowid

        logger.info("Medication added: #%d '%s'", medication_id, medication.name)
        return replace(medication, id=medication_id, created_at=created_at, updated_at=updated_at)

    def get_medication(self, medication_id: int, household_id: int) -> Medication | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM medications WHERE id = ? AND household_id = ?",
                (medication_id, household_id),
            ).fetchone()
        return self._row_to_medication(row) if row else None

    def list_by_household(self, household_id: int) -> list[Medication]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM medications WHERE household_id = ? ORDER BY name, id",
                (household_id,),
            ).fetchall()
        return [self._row_to_medication(r) for r in rows]

    def set_inventory(self, medication_id: int, household_id: int, quantity: int) -> Medication:
        medication = self.get_medication(medication_id, household_id)
        if medication is None:
            raise ValueError(f"Medication {medication_id} not found")

        now = datetime.now()
        with self._connect() as conn:
            conn.execute(
                "UPDATE medications SET inventory = ?, updated_at = ? WHERE id = ?",
                (quantity, now.isoformat(), medication_id),
            )
        return replace(medication, inventory=quantity, updated_at=now)

    def delete_medication(self, medication_id: int, household_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM medications WHERE id = ? AND household_id = ?",
                (medication_id, household_id),
            )
        return cursor.rowcount > 0

    def log_dose(self, log: MedicationLog) -> MedicationLog:
        """Record a dose. A TAKEN dose uses up one unit of positive inventory.

        Raises ValueError if the medication is not in the log's household.
        """
        medication = self.get_medication(log.medication_id, log.household_id)
        if medication is None:
            raise ValueError(f"Medication {log.medication_id} not found")

        now = datetime.now()
        taken_time = log.taken_time or now
        with self._connect() as conn:
            if log.status is DoseStatus.TAKEN and medication.inventory > 0:
                conn.execute(
                    "UPDATE medications SET inventory = inventory - 1, updated_at = ? WHERE id = ?",
                    (now.isoformat(), medication.id),
                )
            cursor = conn.execute(
                """
                INSERT INTO medication_logs
                    (medication_id, user_id, household_id, status, scheduled_time,
                     taken_time, notes, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    log.medication_id, log.user_id, log.household_id, log.status.value,
                    _to_iso(log.scheduled_time), taken_time.isoformat(), log.notes,
                    now.isoformat(),
                ),
            )
            log_id = cursor.lastrowid

        logger.info("Dose %s logged for medication #%d", log.status.value, log.medication_id)
        return replace(log, id=log_id, taken_time=taken_time, created_at=now)

    def list_logs(self, medication_id: int, household_id: int) -> list[MedicationLog]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM medication_logs
                WHERE medication_id = ? AND household_id = ?
                ORDER BY scheduled_time, id
                """,
                (medication_id, household_id),
            ).fetchall()
        return [self._row_to_log(r) for r in rows]


class GroceryDB(_SQLiteDB):
    """The shared household shopping list."""

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS grocery_items (
                    id           INTEGER PRIMARY KEY AUTOINCREMENT,
                    name         TEXT    NOT NULL,
                    category     TEXT    NOT NULL DEFAULT 'OTHER',
                    needed_by    TEXT,
                    checked      INTEGER NOT NULL DEFAULT 0,
                    added_by_id  INTEGER,
                    household_id INTEGER NOT NULL,
                    created_at   TEXT    NOT NULL,
                    updated_at   TEXT    NOT NULL
                )
            """)
        logger.debug("Grocery table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> GroceryItem:
        return GroceryItem(
            id=row["id"],
            name=row["name"],
            category=GroceryCategory(row["category"]),
            needed_by=_to_date(row["needed_by"]),
            checked=bool(row["checked"]),
            added_by_id=row["added_by_id"],
            household_id=row["household_id"],
            created_at=_to_datetime(row["created_at"]),
            updated_at=_to_datetime(row["updated_at"]),
        )

    def add_item(self, item: GroceryItem) -> GroceryItem:
        now = datetime.now()
        created_at = item.created_at or now
        updated_at = item.updated_at or now
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO grocery_items
                    (name, category, needed_by, checked, added_by_id, household_id,
                     created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.name, item.category.value, _to_iso(item.needed_by),
                    int(item.checked), item.added_by_id, item.household_id,
                    created_at.isoformat(), updated_at.isoformat(),
                ),
            )
            item_id = cursor.lastrowid

        logger.info("Grocery item added: #%d '%s' (%s)", item_id, item.name, item.category.value)
        return replace(item, id=item_id, created_at=created_at, updated_at=updated_at)

    def get_item(self, item_id: int, household_id: int) -> GroceryItem | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM grocery_items WHERE id = ? AND household_id = ?",
                (item_id, household_id),
            ).fetchone()
        return self._row_to_item(row) if row else None

    def list_by_household(
        self, household_id: int, checked: bool | None = None,
    ) -> list[GroceryItem]:
        query = "SELECT * FROM grocery_items WHERE household_id = ?"
        params: list = [household_id]
        if checked is not None:
            query += " AND checked = ?"
            params.append(int(checked))
        query += " ORDER BY category, name, id"

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_item(r) for r in rows]

    def toggle_item(self, item_id: int, household_id: int) -> GroceryItem:
        """Flip the checked flag. Raises ValueError if not found."""
        item = self.get_item(item_id, household_id)
        if item is None:
            raise ValueError(f"Grocery item {item_id} not found")

        now = datetime.now()
        with self._connect() as conn:
            conn.execute(
                "UPDATE grocery_items SET checked = ?, updated_at = ? WHERE id = ?",
                (int(not item.checked), now.isoformat(), item_id),
            )
        return replace(item, checked=not item.checked, updated_at=now)

    def delete_item(self, item_id: int, household_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM grocery_items WHERE id = ? AND household_id = ?",
                (item_id, household_id),
            )
        return cursor.rowcount > 0

    def clear_checked(self, household_id: int) -> int:
        """Delete every checked item of a household; returns how many were removed."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM grocery_items WHERE household_id = ? AND checked = 1",
                (household_id,),
            )
        logger.info("Cleared %d checked grocery items in household %d", cursor.rowcount, household_id)
        return cursor.rowcount


class DeviceTokenDB(_SQLiteDB):
    """Push-notification device registrations."""

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS device_tokens (
                    id         INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id    INTEGER NOT NULL,
                    token      TEXT    NOT NULL UNIQUE,
                    platform   TEXT    NOT NULL DEFAULT 'ios',
                    created_at TEXT    NOT NULL,
                    updated_at TEXT    NOT NULL
                )
            """)
        logger.debug("Device tokens table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_token(row: sqlite3.Row) -> DeviceToken:
        return DeviceToken(
            id=row["id"],
            user_id=row["user_id"],
            token=row["token"],
            platform=row["platform"],
            created_at=_to_datetime(row["created_at"]),
            updated_at=_to_datetime(row["updated_at"]),
        )

    def register(self, user_id: int, token: str, platform: str = "ios") -> DeviceToken:
        """Register a device token; an already-known token is returned unchanged."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM device_tokens WHERE token = ?", (token,)
            ).fetchone()
            if row is not None:
                return self._row_to_token(row)

            now = datetime.now()
            cursor = conn.execute(
                """
                INSERT INTO device_tokens (user_id, token, platform, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (user_id, token, platform, now.isoformat(), now.isoformat()),
            )
            token_id = cursor.lastrowid

        logger.info("Device token registered for user %d (%s)", user_id, platform)
        return DeviceToken(
            id=token_id,
            user_id=user_id,
            token=token,
            platform=platform,
            created_at=now,
            updated_at=now,
        )

    def unregister(self, token: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM device_tokens WHERE token = ?", (token,))
        return cursor.rowcount > 0

    def list_for_user(self, user_id: int) -> list[DeviceToken]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM device_tokens WHERE user_id = ? ORDER BY id", (user_id,)
            ).fetchall()
        return [self._row_to_token(r) for r in rows]
