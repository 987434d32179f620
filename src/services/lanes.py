"""
Lane assignment for multi-day events within one rendered week.

Greedy interval colouring: intervals sorted by start day, longer spans first
on ties, each placed in the first lane with no overlapping interval. For
interval graphs this uses the minimum number of lanes.
"""

from datetime import date

from models.events import LaneLayout, is_multi_day_event


def overlaps(a: tuple[int, int], b: tuple[int, int]) -> bool:
    """Inclusive day-index intervals overlap unless one ends before the other starts."""
    return not (a[1] < b[0] or a[0] > b[1])


def week_indices(start: date, end: date, week_days: list[date]) -> tuple[int, int] | None:
    """
    Indices of the first and last visible week day covered by [start, end].

    Returns None when the event covers none of the week's days.
    """
    visible = [i for i, day in enumerate(week_days) if start <= day <= end]
    if not visible:
        return None
    return visible[0], visible[-1]


def assign_lane_intervals(intervals: list[tuple[str, int, int]]) -> LaneLayout:
    """
    Assign lanes to (event_id, start_index, end_index) intervals.

    Intervals with start > end are ignored.
    """
    candidates = [iv for iv in intervals if iv[1] <= iv[2]]
    candidates.sort(key=lambda iv: (iv[1], -(iv[2] - iv[1])))

    lanes: list[list[tuple[int, int]]] = []
    layout = LaneLayout()

    for event_id, start, end in candidates:
        span = (start, end)
        for lane_index, lane in enumerate(lanes):
            if not any(overlaps(span, existing) for existing in lane):
                lane.append(span)
                layout.lane_of[event_id] = lane_index
                break
        else:
            layout.lane_of[event_id] = len(lanes)
            lanes.append([span])

    layout.max_lanes = len(lanes)
    return layout


def assign_lanes(events: list[dict], week_days: list[date]) -> LaneLayout:
    """
    Assign lanes to the multi-day events visible in one week.

    Single-day events and events outside the week's days are left out.
    """
    intervals = []
    for event in events:
        if not is_multi_day_event(event):
            continue
        indices = week_indices(
            date.fromisoformat(event["date"]),
            date.fromisoformat(event["endDate"]),
            week_days,
        )
        if indices is None:
            continue
        intervals.append((event["id"], *indices))

    return assign_lane_intervals(intervals)
