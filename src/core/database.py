"""
SQLite storage for calendar events.
"""

import sqlite3
import uuid
from datetime import datetime, timezone

from core.config import DB_PATH, EXPORT_VERSION
from models.events import Event

# camelCase event key -> column
COLUMNS = {
    "title": "title",
    "type": "type",
    "date": "date",
    "endDate": "end_date",
    "startTime": "start_time",
    "endTime": "end_time",
    "notes": "notes",
}

SCHEMA = """
    CREATE TABLE IF NOT EXISTS events (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        type TEXT NOT NULL CHECK(type IN ('PLANNING', 'MEETING', 'MONTHLY_REVIEW', 'HOLIDAYS')),
        date TEXT NOT NULL,
        end_date TEXT,
        start_time TEXT,
        end_time TEXT,
        notes TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_events_date ON events(date);

    CREATE TABLE IF NOT EXISTS api_requests (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT UNIQUE NOT NULL,
        timestamp TEXT NOT NULL,
        endpoint TEXT NOT NULL,
        method TEXT NOT NULL,
        client_ip TEXT,
        status_code INTEGER NOT NULL,
        error_code TEXT,
        error_message TEXT,
        processing_time_ms INTEGER NOT NULL,
        lines_received INTEGER,
        drafts_produced INTEGER,
        events_created INTEGER
    );

    CREATE TABLE IF NOT EXISTS api_request_details (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT NOT NULL,
        detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'warning')),
        message TEXT NOT NULL,
        FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
    );

    CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp);
    CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id);
"""


def get_connection() -> sqlite3.Connection:
    """Get a database connection."""
    conn = sqlite3.connect(DB_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def create_schema(conn: sqlite3.Connection) -> None:
    """Create tables and indexes if they don't exist."""
    conn.executescript(SCHEMA)
    conn.commit()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def row_to_event(row: sqlite3.Row) -> Event:
    """Convert a database row to an API event (optional fields omitted when empty)."""
    event: Event = {"id": row["id"]}
    for key, column in COLUMNS.items():
        if row[column] is not None:
            event[key] = row[column]
    event["createdAt"] = row["created_at"]
    event["updatedAt"] = row["updated_at"]
    return event


def create_event(conn: sqlite3.Connection, data: dict, event_id: str | None = None) -> Event:
    """Insert an event and return the stored record."""
    now = _now()
    event_id = event_id or str(uuid.uuid4())
    conn.execute(
        """
        INSERT INTO events (
            id, title, type, date, end_date, start_time,
            end_time, notes, created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            event_id,
            data["title"],
            data["type"],
            data["date"],
            data.get("endDate") or None,
            data.get("startTime") or None,
            data.get("endTime") or None,
            data.get("notes") or None,
            data.get("createdAt", now),
            data.get("updatedAt", now),
        ),
    )
    conn.commit()
    return get_event(conn, event_id)


def get_event(conn: sqlite3.Connection, event_id: str) -> Event | None:
    row = conn.execute("SELECT * FROM events WHERE id = ?", (event_id,)).fetchone()
    return row_to_event(row) if row else None


def list_events(conn: sqlite3.Connection) -> list[Event]:
    """All events ordered by date."""
    rows = conn.execute("SELECT * FROM events ORDER BY date, created_at").fetchall()
    return [row_to_event(r) for r in rows]


def update_event(conn: sqlite3.Connection, event_id: str, changes: dict) -> Event | None:
    """Apply a partial update; returns None if the event doesn't exist."""
    assignments = []
    values = []
    for key, value in changes.items():
        if key in COLUMNS:
            assignments.append(f"{COLUMNS[key]} = ?")
            values.append(value if value != "" else None)
    assignments.append("updated_at = ?")
    values.append(_now())

    cursor = conn.execute(
        f"UPDATE events SET {', '.join(assignments)} WHERE id = ?",
        (*values, event_id),
    )
    conn.commit()
    if cursor.rowcount == 0:
        return None
    return get_event(conn, event_id)


def delete_event(conn: sqlite3.Connection, event_id: str) -> bool:
    cursor = conn.execute("DELETE FROM events WHERE id = ?", (event_id,))
    conn.commit()
    return cursor.rowcount > 0


def events_in_range(conn: sqlite3.Connection, start: str, end: str) -> list[Event]:
    """Events whose start date lies within [start, end] (ISO strings)."""
    rows = conn.execute(
        "SELECT * FROM events WHERE date >= ? AND date <= ? ORDER BY date, created_at",
        (start, end),
    ).fetchall()
    return [row_to_event(r) for r in rows]


def events_by_type(conn: sqlite3.Connection, event_type: str) -> list[Event]:
    rows = conn.execute(
        "SELECT * FROM events WHERE type = ? ORDER BY date, created_at", (event_type,)
    ).fetchall()
    return [row_to_event(r) for r in rows]


def export_events(conn: sqlite3.Connection) -> dict:
    """Snapshot of all events in the export format."""
    return {
        "events": list_events(conn),
        "exportedAt": _now(),
        "version": EXPORT_VERSION,
    }


def import_events(conn: sqlite3.Connection, payload: dict) -> int:
    """
    Insert events from an export payload, keeping their ids and timestamps.

    Events whose id already exists are skipped. Returns the number inserted.
    """
    inserted = 0
    for event in payload.get("events", []):
        if event.get("id") and get_event(conn, event["id"]) is not None:
            continue
        create_event(conn, event, event_id=event.get("id"))
        inserted += 1
    return inserted
