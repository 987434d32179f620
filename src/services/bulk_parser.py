"""
Bulk text import: one event per pasted line.

Handles lines like:
- "PI Planning Kickoff July 1, 2025 (Tue)"
- "Product Mngt Leader Review July 9-10, 2025 (Wed-Thu)"
- "PI Planning Session (2-day workshop) Week of July 21-24, 2025 (Mon-Thu)"
- "Commit Documentation Week of July 28 - Aug 1, 2025 (Mon-Fri)"

Each line is parsed independently; a line that cannot be parsed contributes
no draft and never aborts the batch.
"""

import re
from collections.abc import Callable
from datetime import date, datetime, timedelta

from dateutil import parser as dtparse

from core.config import (
    BULK_TYPE_KEYWORDS,
    DEFAULT_BULK_TYPE,
    DEFAULT_TITLE,
    MONTHS,
    OPERATING_END,
    OPERATING_START,
    WEEK_OF_SPAN_DAYS,
)
from models.events import EventDraft, EventType

_MONTH_NAMES = (
    r"january|february|march|april|may|june|july|august|september|october|november|december"
    r"|jan|feb|mar|apr|jun|jul|aug|sep|oct|nov|dec"
)
_DASHES_RE = re.compile(r"\s*[–—]\s*|\s+-\s*|\s*-\s+")
_PARENS_RE = re.compile(r"\([^)]*\)")
_TRAILING_PARENS_RE = re.compile(r"\s*\([^)]*\)?\s*$")
_WEEK_OF_RE = re.compile(r"week of\s+", re.IGNORECASE)
_TRAILING_WEEK_OF_RE = re.compile(r"\s*\bweek of\s*$", re.IGNORECASE)
_SPACES_RE = re.compile(r"\s{2,}")

# Jul 28 - Aug 1, 2025 (second month optional, comma before the year optional)
_CROSS_MONTH_RANGE_RE = re.compile(
    rf"\b({_MONTH_NAMES})\s+(\d{{1,2}})\s*-\s*(?:({_MONTH_NAMES})\s+)?(\d{{1,2}})(?:,\s*|\s+)(\d{{4}})\b",
    re.IGNORECASE,
)
# July 9-10, 2025
_SAME_MONTH_RANGE_RE = re.compile(
    rf"\b({_MONTH_NAMES})\s+(\d{{1,2}})\s*-\s*(\d{{1,2}})(?:,\s*|\s+)(\d{{4}})\b",
    re.IGNORECASE,
)

# July 1, 2025 / Sep 3 / 2025-09-03 / 9/3/2025
_MONTH_DAY_RE = re.compile(
    rf"\b(?:{_MONTH_NAMES})\.?\s+\d{{1,2}}(?:st|nd|rd|th)?\b(?:,?\s*\d{{4}}\b)?",
    re.IGNORECASE,
)
_ISO_DATE_RE = re.compile(r"\b\d{4}-\d{1,2}-\d{1,2}\b")
_NUMERIC_DATE_RE = re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b")

# Where the date begins; everything before it is the title
_DATE_START_RE = re.compile(
    rf"\b(?:{_MONTH_NAMES})\.?\s+\d{{1,2}}(?:st|nd|rd|th)?\b"
    r"|\b\d{4}-\d{1,2}-\d{1,2}\b"
    r"|\b\d{1,2}/\d{1,2}/\d{4}\b",
    re.IGNORECASE,
)


def _month_number(name: str) -> int:
    try:
        return MONTHS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown month: {name!r}") from None


def _cross_month_range(m: re.Match) -> tuple[date, date]:
    year = int(m.group(5))
    start_month = _month_number(m.group(1))
    end_month = _month_number(m.group(3) or m.group(1))
    end = date(year, end_month, int(m.group(4)))
    # "Dec 29 - Jan 2, 2026": the year belongs to the end of the range
    start_year = year - 1 if end_month < start_month else year
    start = date(start_year, start_month, int(m.group(2)))
    return start, end


def _same_month_range(m: re.Match) -> tuple[date, date]:
    year = int(m.group(4))
    month = _month_number(m.group(1))
    return date(year, month, int(m.group(2))), date(year, month, int(m.group(3)))


# Checked in order, first match wins
RANGE_PATTERNS: list[tuple[str, re.Pattern, Callable[[re.Match], tuple[date, date]]]] = [
    ("cross_month_range", _CROSS_MONTH_RANGE_RE, _cross_month_range),
    ("same_month_range", _SAME_MONTH_RANGE_RE, _same_month_range),
]

SINGLE_DATE_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("month_day", _MONTH_DAY_RE),
    ("iso_date", _ISO_DATE_RE),
    ("numeric_date", _NUMERIC_DATE_RE),
]


def normalize_line(line: str) -> str:
    """Canonicalize dashes to " - " and drop parenthetical groups."""
    s = _DASHES_RE.sub(" - ", line.strip())
    s = _PARENS_RE.sub("", s)
    return _SPACES_RE.sub(" ", s).strip()


def clean_title(s: str) -> str:
    """
    Drop trailing (Wed-Thu) style remnants from the text before the date.

    A "Week of" left dangling in front of the date is dropped too, so
    "Commit Documentation Week of July 28 - Aug 1, 2025" is titled
    "Commit Documentation", the way the PI seed events name it.
    """
    s = _TRAILING_PARENS_RE.sub("", s)
    s = _TRAILING_WEEK_OF_RE.sub("", s)
    return s.strip()


def guess_type(title: str) -> EventType:
    """Heuristic type guesser for bulk imports."""
    t = title.lower()
    for type_name, keywords in BULK_TYPE_KEYWORDS:
        if any(keyword in t for keyword in keywords):
            return EventType(type_name)
    return EventType(DEFAULT_BULK_TYPE)


def expand_days(start: date, end: date) -> list[date]:
    """Every calendar day from start to end, inclusive."""
    if end < start:
        raise ValueError(f"Range ends before it starts: {start} - {end}")
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def match_range(text: str) -> tuple[date, date] | None:
    """Try the explicit range patterns in priority order."""
    for _name, pattern, extract in RANGE_PATTERNS:
        m = pattern.search(text)
        if m:
            return extract(m)
    return None


def parse_single_date(text: str, reference_date: date | None = None) -> date | None:
    """
    Single date at a known shape ("July 1, 2025", "Sep 3", "2025-09-03", "9/3/2025").

    Only the matched text is handed to dateutil; missing components are
    filled from reference_date. Stray numbers ("Sprint 12") are not dates.
    """
    for _name, pattern in SINGLE_DATE_PATTERNS:
        m = pattern.search(text)
        if m:
            ref = reference_date or date.today()
            default = datetime(ref.year, ref.month, ref.day)
            return dtparse.parse(m.group(0), default=default).date()
    return None


def _parse_dates(date_part: str, week_of: bool, reference_date: date | None) -> list[date]:
    span = match_range(date_part)
    if span is None:
        single = parse_single_date(date_part, reference_date)
        if single is None:
            return []
        if not week_of:
            return [single]
        span = (single, single + timedelta(days=WEEK_OF_SPAN_DAYS - 1))
    return expand_days(*span)


def parse_line_to_events(line: str, *, reference_date: date | None = None) -> list[EventDraft]:
    """
    Parse one line into zero or one drafts.

    Ranges become a single multi-day draft; a single date becomes a
    single-day draft; lines without a recognizable date yield nothing.
    Text after the date is ignored.
    """
    raw = line.strip()
    if not raw:
        return []

    s = normalize_line(raw)

    # Split title vs date where the first date begins
    m = _DATE_START_RE.search(s)
    if not m:
        return []
    title_part = s[: m.start()]
    date_part = s[m.start():]
    week_of = bool(_WEEK_OF_RE.search(title_part))

    try:
        days = _parse_dates(date_part, week_of, reference_date)
    except (ValueError, OverflowError) as e:
        print(f"  Date parsing error in line {raw!r}: {e}")
        return []

    if not days:
        return []

    title = clean_title(title_part) or DEFAULT_TITLE
    event_type = guess_type(title)

    if len(days) > 1:
        return [EventDraft.multi_day(event_type, title, days[0], days[-1])]
    return [EventDraft.single_day(event_type, title, days[0])]


def split_lines(text: str) -> list[str]:
    """Split pasted text into lines (LF or CRLF)."""
    return re.split(r"\r?\n", text)


def clip_to_window(
    drafts: list[EventDraft], operating_window: tuple[date, date] | None = None
) -> list[EventDraft]:
    """Keep drafts whose date lies inside the operating window (inclusive)."""
    window_start, window_end = operating_window or (OPERATING_START, OPERATING_END)
    return [d for d in drafts if window_start <= d.date <= window_end]


def parse_bulk_text(
    text: str,
    *,
    clip_to_operating_year: bool = True,
    operating_window: tuple[date, date] | None = None,
    reference_date: date | None = None,
) -> list[EventDraft]:
    """
    Parse many lines into drafts, in input order.

    With clip_to_operating_year, drafts whose date falls outside the
    operating window (inclusive) are dropped.
    """
    drafts = [
        draft
        for line in split_lines(text)
        for draft in parse_line_to_events(line, reference_date=reference_date)
    ]

    if not clip_to_operating_year:
        return drafts

    return clip_to_window(drafts, operating_window)


def parse_bulk_with_report(
    text: str,
    *,
    clip_to_operating_year: bool = True,
    operating_window: tuple[date, date] | None = None,
    reference_date: date | None = None,
) -> tuple[list[EventDraft], int, list[str]]:
    """
    Same as parse_bulk_text, plus diagnostics for callers that show them.

    Returns (drafts, non-empty line count, lines that produced no draft).
    """
    drafts: list[EventDraft] = []
    skipped: list[str] = []
    received = 0
    for line in split_lines(text):
        if not line.strip():
            continue
        received += 1
        line_drafts = parse_line_to_events(line, reference_date=reference_date)
        if not line_drafts:
            skipped.append(line.strip())
        drafts.extend(line_drafts)

    if clip_to_operating_year:
        drafts = clip_to_window(drafts, operating_window)
    return drafts, received, skipped
