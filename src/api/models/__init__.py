"""API Pydantic models."""

from .requests import BulkTextRequest, EventPayload, NaturalTextRequest
from .responses import (
    BulkParseResponse,
    DraftResponse,
    ErrorCodes,
    ErrorResponse,
    EventResponse,
    ExportResponse,
    HealthResponse,
    ImportResponse,
    MonthLayoutResponse,
    QuarterResponse,
)

__all__ = [
    "BulkParseResponse",
    "BulkTextRequest",
    "DraftResponse",
    "ErrorCodes",
    "ErrorResponse",
    "EventPayload",
    "EventResponse",
    "ExportResponse",
    "HealthResponse",
    "ImportResponse",
    "MonthLayoutResponse",
    "NaturalTextRequest",
    "QuarterResponse",
]
