"""
Data models for parsed drafts, stored events and calendar layout.

Drafts are frozen dataclasses so parsing is side-effect free and comparable;
stored events stay as TypedDicts since they travel straight to and from
SQLite rows and JSON.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import TypedDict


class EventType(str, Enum):
    """Closed set of calendar event categories."""
    PLANNING = "PLANNING"
    MEETING = "MEETING"
    MONTHLY_REVIEW = "MONTHLY_REVIEW"
    HOLIDAYS = "HOLIDAYS"


@dataclass(frozen=True)
class EventDraft:
    """
    Parsed, not-yet-persisted event.

    Either single-day (date, optional start/end time) or multi-day
    (date == start_date, end_date after start_date, no times). Use the
    single_day() / multi_day() constructors to keep the two shapes apart.
    """
    type: EventType
    title: str
    date: date
    start_date: date | None = None
    end_date: date | None = None
    start_time: str | None = None
    end_time: str | None = None

    @classmethod
    def single_day(
        cls,
        type: EventType,
        title: str,
        day: date,
        start_time: str | None = None,
        end_time: str | None = None,
    ) -> "EventDraft":
        return cls(type=type, title=title, date=day, start_time=start_time, end_time=end_time)

    @classmethod
    def multi_day(cls, type: EventType, title: str, start: date, end: date) -> "EventDraft":
        if end <= start:
            raise ValueError(f"Multi-day draft must end after it starts: {start} - {end}")
        return cls(type=type, title=title, date=start, start_date=start, end_date=end)

    @property
    def is_multi_day(self) -> bool:
        return self.end_date is not None

    def to_dict(self) -> dict:
        """Serialize with camelCase keys, omitting unset fields."""
        data = {
            "type": self.type.value,
            "title": self.title,
            "date": self.date.isoformat(),
        }
        if self.start_date is not None:
            data["startDate"] = self.start_date.isoformat()
        if self.end_date is not None:
            data["endDate"] = self.end_date.isoformat()
        if self.start_time is not None:
            data["startTime"] = self.start_time
        if self.end_time is not None:
            data["endTime"] = self.end_time
        return data

    def to_event_data(self) -> dict:
        """Payload for storage: multi-day events persist as date + endDate."""
        data = self.to_dict()
        data.pop("startDate", None)
        return data


# =============================================================================
# NATURAL LANGUAGE PARSE RESULTS
# =============================================================================


@dataclass(frozen=True)
class Parsed:
    """Successful parse."""
    draft: EventDraft


@dataclass(frozen=True)
class NoDate:
    """No usable calendar date in the input."""
    reason: str = "No date found"


@dataclass(frozen=True)
class NoTitle:
    """A date was found but nothing was left for the title."""
    reason: str = "No title left after removing date and time"


ParseResult = Parsed | NoDate | NoTitle


# =============================================================================
# STORED EVENTS
# =============================================================================


class Event(TypedDict, total=False):
    """Persisted calendar event (camelCase, as served by the API)."""
    id: str
    title: str
    type: str
    date: str
    endDate: str | None
    startTime: str | None
    endTime: str | None
    notes: str | None
    createdAt: str
    updatedAt: str


def is_multi_day_event(event: dict) -> bool:
    """Check if a stored event spans more than one day."""
    end = event.get("endDate")
    return bool(end) and end != event["date"]


# =============================================================================
# LAYOUT
# =============================================================================


@dataclass
class LaneLayout:
    """Lane per event id for one rendered week."""
    lane_of: dict[str, int] = field(default_factory=dict)
    max_lanes: int = 0


@dataclass(frozen=True)
class SpanGeometry:
    """Horizontal placement of a spanning event within a week row."""
    start_index: int
    span_days: int
    left_percent: float
    width_percent: float
