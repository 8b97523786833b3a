"""Shared test fixtures and configuration.

Sets up environment variables before any src import so src.config never
picks up a real .env, and provides temp-file repositories and API clients.
"""

import os
import tempfile

# Patch env vars BEFORE any src imports
os.environ["OPENAI_API_KEY"] = ""
os.environ["DATABASE_PATH"] = os.path.join(tempfile.gettempdir(), "household-hub-tests.db")

import pytest
from datetime import datetime

from src.data.models import User, UserRole


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_household.db")


@pytest.fixture
def household_db(tmp_db_path):
    from src.data.db import HouseholdDB
    return HouseholdDB(db_path=tmp_db_path)


@pytest.fixture
def user_db(tmp_db_path):
    from src.data.db import UserDB
    return UserDB(db_path=tmp_db_path)


@pytest.fixture
def chore_db(tmp_db_path):
    from src.data.db import ChoreDB
    return ChoreDB(db_path=tmp_db_path)


@pytest.fixture
def event_db(tmp_db_path):
    from src.data.db import EventDB
    return EventDB(db_path=tmp_db_path)


@pytest.fixture
def medication_db(tmp_db_path):
    from src.data.db import MedicationDB
    return MedicationDB(db_path=tmp_db_path)


@pytest.fixture
def grocery_db(tmp_db_path):
    from src.data.db import GroceryDB
    return GroceryDB(db_path=tmp_db_path)


@pytest.fixture
def device_token_db(tmp_db_path):
    from src.data.db import DeviceTokenDB
    return DeviceTokenDB(db_path=tmp_db_path)


@pytest.fixture
def guardian():
    """A guardian of household 1, not persisted."""
    return User(id=7, email="dana@example.com", name="Dana", household_id=1, role=UserRole.GUARDIAN)


@pytest.fixture
def fixed_now():
    return datetime(2025, 3, 10, 8, 30, 15)
