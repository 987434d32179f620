"""SQLite request logging for API."""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from fastapi import HTTPException

from core.database import get_connection


@dataclass
class RequestLog:
    """Captured request/response data for logging."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    started: float = field(default_factory=time.time)
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    lines_received: int | None = None
    drafts_produced: int | None = None
    events_created: int | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (type, message)

    def finish(self, status_code: int) -> None:
        """Record final status and elapsed time."""
        self.status_code = status_code
        self.processing_time_ms = int((time.time() - self.started) * 1000)


def log_request(log: RequestLog) -> None:
    """Write request log to SQLite database."""
    conn = get_connection()
    try:
        cursor = conn.cursor()

        # Insert main request record
        cursor.execute(
            """
            INSERT INTO api_requests (
                request_id, timestamp, endpoint, method, client_ip,
                status_code, error_code, error_message, processing_time_ms,
                lines_received, drafts_produced, events_created
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                log.request_id,
                log.timestamp,
                log.endpoint,
                log.method,
                log.client_ip,
                log.status_code,
                log.error_code,
                log.error_message,
                log.processing_time_ms,
                log.lines_received,
                log.drafts_produced,
                log.events_created,
            ),
        )

        # Insert detail records
        for detail_type, message in log.details:
            cursor.execute(
                """
                INSERT INTO api_request_details (request_id, detail_type, message)
                VALUES (?, ?, ?)
            """,
                (log.request_id, detail_type, message),
            )

        conn.commit()
    finally:
        conn.close()


def record_http_error(log: RequestLog, e: HTTPException) -> None:
    """Copy an HTTPException's standard error body into the request log."""
    log.finish(e.status_code)
    if isinstance(e.detail, dict):
        log.error_code = e.detail.get("code")
        log.error_message = e.detail.get("error")
        for detail in e.detail.get("details", []):
            log.details.append(("validation_error", detail))
    else:
        log.error_message = str(e.detail)


def record_unexpected_error(log: RequestLog, e: Exception) -> None:
    log.finish(500)
    log.error_code = "INTERNAL_ERROR"
    log.error_message = str(e)


def write_request_log(log: RequestLog) -> None:
    """Log the request, never failing it if logging fails."""
    try:
        log_request(log)
    except Exception:
        # Don't fail the request if logging fails
        pass
