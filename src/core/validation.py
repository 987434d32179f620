"""
Event payload validation.
"""

import re
from datetime import date

from models.events import EventType

_HHMM_RE = re.compile(r"^(\d{2}):(\d{2})$")

EVENT_FIELDS = {"title", "type", "date", "endDate", "startTime", "endTime", "notes"}


def parse_iso_date(value: str) -> date | None:
    """Parse YYYY-MM-DD, returning None when malformed."""
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def is_valid_hhmm(value: str) -> bool:
    """Check a 24-hour HH:MM string."""
    m = _HHMM_RE.match(value)
    if not m:
        return False
    return int(m.group(1)) <= 23 and int(m.group(2)) <= 59


def validate_event(data: dict, partial: bool = False) -> list[str]:
    """
    Validate an event payload and return a list of error messages.

    Checks:
    1. Title and date are present (unless partial update)
    2. Type is a known event type
    3. Dates are ISO and the end date is not before the start date
    4. Times are HH:MM
    """
    errors = []

    unknown = set(data) - EVENT_FIELDS
    if unknown:
        errors.append(f"Unknown field(s): {', '.join(sorted(unknown))}")

    # Check 1: Required fields
    if not partial or "title" in data:
        if not str(data.get("title") or "").strip():
            errors.append("Title is required")
    if not partial and not data.get("date"):
        errors.append("Date is required")
    if not partial and not data.get("type"):
        errors.append("Type is required")

    # Check 2: Type
    event_type = data.get("type")
    if event_type and event_type not in {t.value for t in EventType}:
        errors.append(f"Invalid event type '{event_type}'")

    # Check 3: Dates
    start = end = None
    if data.get("date"):
        start = parse_iso_date(data["date"])
        if start is None:
            errors.append(f"Invalid date '{data['date']}', expected YYYY-MM-DD")
    if data.get("endDate"):
        end = parse_iso_date(data["endDate"])
        if end is None:
            errors.append(f"Invalid end date '{data['endDate']}', expected YYYY-MM-DD")
    if start and end and end < start:
        errors.append("End date must be on or after start date")

    # Check 4: Times
    for key, label in (("startTime", "start time"), ("endTime", "end time")):
        value = data.get(key)
        if value and not is_valid_hhmm(value):
            errors.append(f"Invalid {label} '{value}', expected HH:MM")

    return errors
