"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Fixture generators live beside the tests
sys.path.insert(0, str(Path(__file__).parent / "fixtures"))

API_KEY = "test-api-key"


@pytest.fixture
def reference_date():
    """Fixed 'today' for parsing relative dates (a Wednesday)."""
    return date(2025, 10, 15)


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point the events database at a fresh temporary file."""
    from core import database

    path = tmp_path / "pi-calendar.db"
    monkeypatch.setattr(database, "DB_PATH", path)
    conn = database.get_connection()
    database.create_schema(conn)
    conn.close()
    return path


@pytest.fixture
def conn(db_path):
    """Open connection to the temporary events database."""
    from core import database

    connection = database.get_connection()
    yield connection
    connection.close()


@pytest.fixture
def client(db_path, monkeypatch):
    """API test client with a configured key and a temporary database."""
    from fastapi.testclient import TestClient

    from api.main import app
    from core import config

    monkeypatch.setattr(config, "CALENDAR_API_KEY", API_KEY)
    with TestClient(app) as test_client:
        test_client.headers.update({"X-API-Key": API_KEY})
        yield test_client


@pytest.fixture
def sample_event():
    """Sample stored-event payload for testing."""
    return {
        "title": "PI Planning Kickoff",
        "type": "PLANNING",
        "date": "2025-11-03",
        "notes": "Room 4B",
    }


@pytest.fixture
def sample_events():
    """Stored events for layout tests: two overlapping spans, one later span, singles."""
    return [
        {"id": "a", "title": "Sprint Demo Prep", "type": "PLANNING",
         "date": "2025-11-03", "endDate": "2025-11-05"},
        {"id": "b", "title": "Leadership Review", "type": "MEETING",
         "date": "2025-11-04", "endDate": "2025-11-06"},
        {"id": "c", "title": "Commit Documentation", "type": "PLANNING",
         "date": "2025-11-06", "endDate": "2025-11-07"},
        {"id": "d", "title": "Standup", "type": "MEETING", "date": "2025-11-04"},
        {"id": "e", "title": "Retro", "type": "MEETING", "date": "2025-11-04",
         "startTime": "15:00"},
        {"id": "f", "title": "Budget Sync", "type": "MEETING", "date": "2025-11-04"},
        {"id": "g", "title": "Veterans Day", "type": "HOLIDAYS", "date": "2025-11-11"},
    ]


BULK_SAMPLE = """PI Planning Kickoff July 1, 2025 (Tue)
Product Mngt Leader Review July 9-10, 2025 (Wed-Thu)
PI Planning Session (2-day workshop) Week of July 21-24, 2025 (Mon-Thu)
Commit Documentation Week of July 28 - Aug 1, 2025 (Mon-Fri)"""


@pytest.fixture
def bulk_sample():
    """Real-world pasted PI planning lines."""
    return BULK_SAMPLE
