"""
Calendar grid geometry and event queries for the quarterly month view.

Months render as Sunday-to-Saturday grids, but only business days are
shown; each Monday starts a new week row. Multi-day events are laid out per
week row in lanes above the single-day events of each cell.
"""

import calendar
from datetime import date, timedelta

from core.config import (
    BUSINESS_DAYS,
    DAY_CELL_EVENT_LIMIT,
    DAY_HEADER_PX,
    LANE_HEIGHT_PX,
    QUARTER_MONTHS,
)
from models.events import EventType, SpanGeometry, is_multi_day_event
from services.lanes import assign_lanes, week_indices

MONTH_ABBR = calendar.month_abbr


# =============================================================================
# EVENT QUERIES
# =============================================================================


def event_bounds(event: dict) -> tuple[date, date]:
    """First and last day of a stored event."""
    start = date.fromisoformat(event["date"])
    end = date.fromisoformat(event["endDate"]) if is_multi_day_event(event) else start
    return start, end


def is_event_on_date(event: dict, day: date) -> bool:
    """Check if the event occurs on the given day."""
    start, end = event_bounds(event)
    return start <= day <= end


def events_for_date(events: list[dict], day: date) -> list[dict]:
    return [e for e in events if is_event_on_date(e, day)]


def filter_events(
    events: list[dict], event_type: EventType | None = None, query: str = ""
) -> list[dict]:
    """Filter by type and a case-insensitive search over title and notes."""
    filtered = events
    if event_type is not None:
        filtered = [e for e in filtered if e["type"] == event_type.value]

    q = query.strip().lower()
    if q:
        filtered = [
            e for e in filtered
            if q in e["title"].lower() or q in (e.get("notes") or "").lower()
        ]
    return filtered


def multi_day_events_for_range(events: list[dict], start: date, end: date) -> list[dict]:
    """Multi-day events intersecting the inclusive window [start, end]."""
    result = []
    for event in events:
        if not is_multi_day_event(event):
            continue
        event_start, event_end = event_bounds(event)
        if event_end >= start and event_start <= end:
            result.append(event)
    return result


# =============================================================================
# GRID
# =============================================================================


def month_grid_days(year: int, month: int) -> list[date]:
    """Every day from the Sunday on/before the 1st to the Saturday on/after month end."""
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    start = first - timedelta(days=(first.weekday() + 1) % 7)
    end = last + timedelta(days=(5 - last.weekday()) % 7)
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def group_days_into_weeks(days: list[date]) -> list[list[date]]:
    """Keep business days only and start a new week on each Monday."""
    weeks: list[list[date]] = []
    current: list[date] = []
    for day in days:
        if day.weekday() not in BUSINESS_DAYS:
            continue
        if day.weekday() == 0 and current:
            weeks.append(current)
            current = []
        current.append(day)
    if current:
        weeks.append(current)
    return weeks


def span_geometry(start: date, end: date, week_days: list[date]) -> SpanGeometry | None:
    """Left offset and width (percent of the week row) of a spanning event."""
    indices = week_indices(start, end, week_days)
    if indices is None:
        return None
    column = 100 / len(week_days)
    span_days = indices[1] - indices[0] + 1
    return SpanGeometry(
        start_index=indices[0],
        span_days=span_days,
        left_percent=indices[0] * column,
        width_percent=span_days * column - 0.5,  # Small gap between days
    )


def day_cell_offset_px(max_lanes: int) -> int:
    """Vertical space reserved above single-day events for the lane stack."""
    return DAY_HEADER_PX + max_lanes * LANE_HEIGHT_PX


# =============================================================================
# OPERATING-YEAR QUARTERS
# =============================================================================


def quarter_of(day: date) -> str:
    """Operating-year quarter name (Q1 = Aug-Oct) for a day."""
    for name, months in QUARTER_MONTHS.items():
        if day.month in months:
            return name
    raise ValueError(f"Month {day.month} not in any quarter")


def operating_year_quarters(start_year: int) -> list[tuple[str, list[tuple[int, int]]]]:
    """
    Quarters of the operating year starting in August of start_year.

    Returns (name, [(year, month), ...]) with January onwards in the next year.
    """
    quarters = []
    for name, months in QUARTER_MONTHS.items():
        quarters.append(
            (name, [(start_year if m >= 8 else start_year + 1, m) for m in months])
        )
    return quarters


def quarter_header(name: str, months: list[tuple[int, int]]) -> str:
    """
    Header like "Q1: Aug - Sep - Oct 2025".

    Quarters crossing a year boundary label every month with its year.
    """
    years = {year for year, _ in months}
    if len(years) == 1:
        names = " - ".join(MONTH_ABBR[m] for _, m in months)
        return f"{name}: {names} {months[0][0]}"
    pairs = " - ".join(f"{MONTH_ABBR[m]} {year}" for year, m in months)
    return f"{name}: {pairs}"


# =============================================================================
# MONTH LAYOUT
# =============================================================================


def layout_month(events: list[dict], year: int, month: int) -> list[dict]:
    """
    Lay out one month: per week row, lanes and geometry for spanning events
    and the single-day events of each visible day.
    """
    grid = month_grid_days(year, month)
    spanning = multi_day_events_for_range(events, grid[0], grid[-1])
    single_day = [e for e in events if not is_multi_day_event(e)]

    weeks = []
    for week_days in group_days_into_weeks(grid):
        week_events = multi_day_events_for_range(spanning, week_days[0], week_days[-1])
        layout = assign_lanes(week_events, week_days)

        placed = []
        for event in week_events:
            geometry = span_geometry(*event_bounds(event), week_days)
            if geometry is None:
                continue
            placed.append(
                {
                    "event": event,
                    "lane": layout.lane_of.get(event["id"], 0),
                    "geometry": geometry,
                }
            )

        days = []
        for day in week_days:
            day_events = events_for_date(single_day, day)
            days.append(
                {
                    "date": day,
                    "inMonth": day.month == month,
                    "events": day_events[:DAY_CELL_EVENT_LIMIT],
                    "hiddenCount": max(len(day_events) - DAY_CELL_EVENT_LIMIT, 0),
                }
            )

        weeks.append(
            {
                "days": days,
                "spanning": placed,
                "maxLanes": layout.max_lanes,
                "dayCellOffsetPx": day_cell_offset_px(layout.max_lanes),
            }
        )

    return weeks
