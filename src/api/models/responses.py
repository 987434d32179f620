"""Pydantic response models for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    TEXT_TOO_LARGE = "TEXT_TOO_LARGE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNPARSEABLE = "UNPARSEABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DraftResponse(BaseModel):
    """Parsed event draft (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    title: str
    date: str
    start_date: str | None = Field(None, alias="startDate")
    end_date: str | None = Field(None, alias="endDate")
    start_time: str | None = Field(None, alias="startTime")
    end_time: str | None = Field(None, alias="endTime")


class BulkParseResponse(BaseModel):
    """Result of parsing pasted text."""

    model_config = ConfigDict(populate_by_name=True)

    drafts: list[DraftResponse]
    lines_received: int = Field(alias="linesReceived")
    lines_skipped: int = Field(alias="linesSkipped")


class EventResponse(BaseModel):
    """Stored calendar event."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    type: str
    date: str
    end_date: str | None = Field(None, alias="endDate")
    start_time: str | None = Field(None, alias="startTime")
    end_time: str | None = Field(None, alias="endTime")
    notes: str | None = None
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


class ExportResponse(BaseModel):
    """JSON export of all events."""

    model_config = ConfigDict(populate_by_name=True)

    events: list[EventResponse]
    exported_at: str = Field(alias="exportedAt")
    version: str


class ImportResponse(BaseModel):
    imported: int


class SpanResponse(BaseModel):
    """Spanning event placed in a week row."""

    model_config = ConfigDict(populate_by_name=True)

    event: EventResponse
    lane: int
    start_index: int = Field(alias="startIndex")
    span_days: int = Field(alias="spanDays")
    left_percent: float = Field(alias="leftPercent")
    width_percent: float = Field(alias="widthPercent")


class DayResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    in_month: bool = Field(alias="inMonth")
    events: list[EventResponse]
    hidden_count: int = Field(alias="hiddenCount")


class WeekResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    days: list[DayResponse]
    spanning: list[SpanResponse]
    max_lanes: int = Field(alias="maxLanes")
    day_cell_offset_px: int = Field(alias="dayCellOffsetPx")


class MonthLayoutResponse(BaseModel):
    year: int
    month: int
    quarter: str
    weeks: list[WeekResponse]


class QuarterResponse(BaseModel):
    name: str
    header: str
    months: list[str]  # YYYY-MM
