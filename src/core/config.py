"""
Configuration constants and environment setup.
"""

import os
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("CALENDAR_DB_PATH", PROJECT_ROOT / "data" / "db" / "pi-calendar.db"))
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# OPERATING YEAR
# =============================================================================

# Inclusive window used to clip bulk imports (Operating Year 2025-26)
OPERATING_START = date.fromisoformat(os.environ.get("OPERATING_YEAR_START", "2025-08-01"))
OPERATING_END = date.fromisoformat(os.environ.get("OPERATING_YEAR_END", "2026-07-31"))

# Operating-year quarters, by calendar month number
QUARTER_MONTHS = {
    "Q1": (8, 9, 10),
    "Q2": (11, 12, 1),
    "Q3": (2, 3, 4),
    "Q4": (5, 6, 7),
}

# Monday (0) through Friday (4), as returned by date.weekday()
BUSINESS_DAYS = frozenset({0, 1, 2, 3, 4})

# =============================================================================
# PARSING
# =============================================================================

MONTHS = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

DEFAULT_TITLE = "Event"
DEFAULT_BULK_TYPE = "PLANNING"
DEFAULT_NATURAL_TYPE = "MEETING"

# "Week of <date>" with no explicit range covers a work week
WEEK_OF_SPAN_DAYS = 5

# Bulk import type guessing, checked against the title in order
BULK_TYPE_KEYWORDS = (
    ("MONTHLY_REVIEW", ("monthly review",)),
    ("HOLIDAYS", ("holiday", "annual leave", "pto")),
    ("MEETING", ("meeting", "review", "alignment", "kickoff")),
)

# Quick-add type inference, checked against the whole input in order
NATURAL_TYPE_KEYWORDS = (
    ("PLANNING", ("planning", "pi planning", "qbr planning")),
    ("MONTHLY_REVIEW", ("monthly review", "month review", "monthly")),
    ("MEETING", ("meeting", "standup", "review", "retrospective", "qbr")),
    ("HOLIDAYS", ("holiday", "vacation", "thanksgiving", "veterans", "christmas")),
)

# =============================================================================
# CALENDAR GRID
# =============================================================================

LANE_HEIGHT_PX = 24
DAY_HEADER_PX = 20
DAY_CELL_EVENT_LIMIT = 2  # Single-day events shown per cell before "+N more"

# =============================================================================
# API CONFIGURATION
# =============================================================================

CALENDAR_API_KEY = os.environ.get("CALENDAR_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
MAX_BULK_TEXT_CHARS = int(os.environ.get("MAX_BULK_TEXT_CHARS", "100000"))
API_VERSION = "1.0.0"
EXPORT_VERSION = "1.0"
