"""API route modules."""

from .calendar import router as calendar_router
from .events import router as events_router
from .health import router as health_router
from .parse import router as parse_router

__all__ = ["calendar_router", "events_router", "health_router", "parse_router"]
