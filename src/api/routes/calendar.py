"""Calendar layout endpoints for the quarterly month view."""

import sqlite3
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_db, verify_api_key
from api.models import ErrorCodes, MonthLayoutResponse, QuarterResponse
from core import database
from models.events import EventType
from services.calendar import (
    filter_events,
    layout_month,
    operating_year_quarters,
    quarter_header,
    quarter_of,
)

router = APIRouter(prefix="/v1/calendar", dependencies=[Depends(verify_api_key)])


def serialize_week(week: dict) -> dict:
    """Flatten layout dataclasses and dates for the response model."""
    return {
        "days": [
            {
                "date": day["date"].isoformat(),
                "inMonth": day["inMonth"],
                "events": day["events"],
                "hiddenCount": day["hiddenCount"],
            }
            for day in week["days"]
        ],
        "spanning": [
            {
                "event": placed["event"],
                "lane": placed["lane"],
                "startIndex": placed["geometry"].start_index,
                "spanDays": placed["geometry"].span_days,
                "leftPercent": placed["geometry"].left_percent,
                "widthPercent": placed["geometry"].width_percent,
            }
            for placed in week["spanning"]
        ],
        "maxLanes": week["maxLanes"],
        "dayCellOffsetPx": week["dayCellOffsetPx"],
    }


@router.get(
    "/{year}/{month}/layout",
    response_model=MonthLayoutResponse,
    response_model_exclude_none=True,
)
def month_layout_endpoint(
    year: int,
    month: int,
    event_type: EventType | None = Query(None, alias="type"),
    q: str = "",
    conn: sqlite3.Connection = Depends(get_db),
):
    """
    Week rows of a month with lanes for multi-day events.

    Optional type and search filters apply before layout.
    """
    if not 1 <= month <= 12:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": f"Invalid month {month}",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": ["Month must be 1-12"],
            },
        )

    events = filter_events(database.list_events(conn), event_type, q)
    weeks = layout_month(events, year, month)
    return {
        "year": year,
        "month": month,
        "quarter": quarter_of(date(year, month, 1)),
        "weeks": [serialize_week(w) for w in weeks],
    }


@router.get("/quarters/{start_year}", response_model=list[QuarterResponse])
def quarters_endpoint(start_year: int):
    """Quarters of the operating year beginning in August of start_year."""
    return [
        {
            "name": name,
            "header": quarter_header(name, months),
            "months": [f"{y:04d}-{m:02d}" for y, m in months],
        }
        for name, months in operating_year_quarters(start_year)
    ]
