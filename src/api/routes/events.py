"""Event CRUD, bulk import and export endpoints."""

import sqlite3
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from api.dependencies import get_client_ip, get_db, verify_api_key
from api.logging import RequestLog, record_http_error, record_unexpected_error, write_request_log
from api.models import (
    BulkTextRequest,
    ErrorCodes,
    EventPayload,
    EventResponse,
    ExportResponse,
    ImportResponse,
)
from api.routes.parse import check_text_size
from core import database
from core.validation import parse_iso_date, validate_event
from models.events import EventType
from services.bulk_parser import parse_bulk_with_report
from services.reports import events_to_workbook, workbook_to_bytes

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def not_found(event_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error": "Event not found",
            "code": ErrorCodes.NOT_FOUND,
            "details": [event_id],
        },
    )


def validation_failed(errors: list[str]) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={
            "error": "Validation failed",
            "code": ErrorCodes.VALIDATION_ERROR,
            "details": errors,
        },
    )


def parse_path_date(value: str) -> str:
    """Validate a YYYY-MM-DD path segment."""
    if parse_iso_date(value) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": f"Invalid date '{value}'",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": ["Expected format: YYYY-MM-DD"],
            },
        )
    return value


# =============================================================================
# COLLECTION
# =============================================================================


@router.get("/events", response_model=list[EventResponse], response_model_exclude_none=True)
def list_events_endpoint(conn: sqlite3.Connection = Depends(get_db)):
    """All events ordered by date."""
    return database.list_events(conn)


@router.post(
    "/events",
    response_model=EventResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_event_endpoint(payload: EventPayload, conn: sqlite3.Connection = Depends(get_db)):
    data = payload.to_event_data()
    errors = validate_event(data)
    if errors:
        raise validation_failed(errors)
    return database.create_event(conn, data)


@router.post(
    "/events/import",
    response_model=list[EventResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def import_text_endpoint(
    body: BulkTextRequest,
    request: Request,
    conn: sqlite3.Connection = Depends(get_db),
):
    """Parse pasted text with the bulk parser and store every draft."""
    request_log = RequestLog(
        endpoint="/v1/events/import",
        method="POST",
        client_ip=get_client_ip(request),
    )
    try:
        check_text_size(body.text)
        drafts, received, skipped = parse_bulk_with_report(
            body.text, clip_to_operating_year=body.clip_to_operating_year
        )
        request_log.lines_received = received
        request_log.drafts_produced = len(drafts)
        for line in skipped:
            request_log.details.append(("warning", f"No date found: {line}"))

        created = [database.create_event(conn, d.to_event_data()) for d in drafts]

        request_log.events_created = len(created)
        request_log.finish(201)
        return created

    except HTTPException as e:
        record_http_error(request_log, e)
        raise

    except Exception as e:
        record_unexpected_error(request_log, e)
        raise

    finally:
        write_request_log(request_log)


@router.get("/events/export", response_model=ExportResponse, response_model_exclude_none=True)
def export_events_endpoint(conn: sqlite3.Connection = Depends(get_db)):
    """JSON snapshot of every event, suitable for /events/restore."""
    return database.export_events(conn)


@router.post("/events/restore", response_model=ImportResponse)
def restore_events_endpoint(payload: ExportResponse, conn: sqlite3.Connection = Depends(get_db)):
    """Load a JSON export; events whose id already exists are left alone."""
    data = payload.model_dump(by_alias=True, exclude_none=True)
    errors = []
    for event in data["events"]:
        fields = {k: v for k, v in event.items() if k not in {"id", "createdAt", "updatedAt"}}
        errors.extend(f"{event['id']}: {e}" for e in validate_event(fields))
    if errors:
        raise validation_failed(errors)
    return ImportResponse(imported=database.import_events(conn, data))


@router.get("/events/export.xlsx")
def export_events_xlsx_endpoint(conn: sqlite3.Connection = Depends(get_db)):
    """Excel workbook of all events."""
    content = workbook_to_bytes(events_to_workbook(database.list_events(conn)))
    stamp = datetime.now(timezone.utc).strftime("%Y_%m_%d")
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="calendar_events_{stamp}.xlsx"'},
    )


@router.get(
    "/events/range/{start_date}/{end_date}",
    response_model=list[EventResponse],
    response_model_exclude_none=True,
)
def events_in_range_endpoint(
    start_date: str, end_date: str, conn: sqlite3.Connection = Depends(get_db)
):
    """Events starting within [start_date, end_date]."""
    return database.events_in_range(conn, parse_path_date(start_date), parse_path_date(end_date))


@router.get(
    "/events/type/{event_type}",
    response_model=list[EventResponse],
    response_model_exclude_none=True,
)
def events_by_type_endpoint(event_type: EventType, conn: sqlite3.Connection = Depends(get_db)):
    return database.events_by_type(conn, event_type.value)


# =============================================================================
# SINGLE EVENT
# =============================================================================


@router.get("/events/{event_id}", response_model=EventResponse, response_model_exclude_none=True)
def get_event_endpoint(event_id: str, conn: sqlite3.Connection = Depends(get_db)):
    event = database.get_event(conn, event_id)
    if event is None:
        raise not_found(event_id)
    return event


@router.put("/events/{event_id}", response_model=EventResponse, response_model_exclude_none=True)
def update_event_endpoint(
    event_id: str, payload: EventPayload, conn: sqlite3.Connection = Depends(get_db)
):
    """Partial update; the merged event must still be valid."""
    existing = database.get_event(conn, event_id)
    if existing is None:
        raise not_found(event_id)

    changes = payload.to_event_data()
    errors = validate_event(changes, partial=True)
    if not errors:
        merged = {k: v for k, v in {**existing, **changes}.items() if k in database.COLUMNS}
        errors = validate_event(merged)
    if errors:
        raise validation_failed(errors)

    return database.update_event(conn, event_id, changes)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event_endpoint(event_id: str, conn: sqlite3.Connection = Depends(get_db)):
    if not database.delete_event(conn, event_id):
        raise not_found(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
