"""
Excel export of calendar events.
"""

from datetime import date
from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from models.events import EventType
from services.calendar import event_bounds, quarter_of

EVENT_HEADERS = ["Title", "Type", "Quarter", "Start", "End", "Start Time", "End Time", "Notes"]
SUMMARY_HEADERS = ["Type", "Events"]

EVENTS_SHEET = "Events"
SUMMARY_SHEET = "Summary"


def format_date_display(d: date) -> str:
    """Format date as M/D/YYYY (platform-safe, no zero-padding)."""
    return f"{d.month}/{d.day}/{d.year}"


def write_events_sheet(ws, events: list[dict]):
    """
    Write one row per event.

    Columns: Title, Type, Quarter, Start, End, Start Time, End Time, Notes.
    End is blank for single-day events.
    """
    for col_idx, header in enumerate(EVENT_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    for row_idx, event in enumerate(events, start=2):
        start, end = event_bounds(event)
        row_data = [
            event["title"],
            event["type"].replace("_", " "),
            quarter_of(start),
            format_date_display(start),
            format_date_display(end) if end != start else "",
            event.get("startTime") or "",
            event.get("endTime") or "",
            event.get("notes") or "",
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)

    ws.column_dimensions[get_column_letter(1)].width = 48


def write_summary_sheet(ws, event_count: int):
    """
    Count events per type with COUNTIF formulas over the Events sheet.

    Row 1: headers; one row per event type; last row: Total = SUM.
    """
    for col_idx, header in enumerate(SUMMARY_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    data_start_row = 2
    data_end_row = max(event_count + 1, data_start_row)
    type_col = "B"

    row_idx = 2
    for event_type in EventType:
        label = event_type.value.replace("_", " ")
        ws.cell(row=row_idx, column=1, value=label)
        ws.cell(
            row=row_idx,
            column=2,
            value=(
                f"=COUNTIF('{EVENTS_SHEET}'!${type_col}${data_start_row}:"
                f'${type_col}${data_end_row},"{label}")'
            ),
        )
        row_idx += 1

    ws.cell(row=row_idx, column=1, value="Total").font = Font(bold=True)
    ws.cell(row=row_idx, column=2, value=f"=SUM(B2:B{row_idx - 1})")


def events_to_workbook(events: list[dict]) -> Workbook:
    """Build the export workbook: Events sheet plus a per-type Summary."""
    wb = Workbook()
    ws_events = wb.active
    ws_events.title = EVENTS_SHEET
    write_events_sheet(ws_events, events)

    ws_summary = wb.create_sheet(title=SUMMARY_SHEET)
    write_summary_sheet(ws_summary, len(events))
    return wb


def workbook_to_bytes(wb: Workbook) -> bytes:
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def save_events_workbook(events: list[dict], output_path: Path):
    """Write the export workbook to disk."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    events_to_workbook(events).save(str(output_path))
    print(f"Saved Excel export to: {output_path}")
