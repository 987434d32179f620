"""
Quick-add parsing of a single free-text sentence.

Examples:
- "Team Meeting tomorrow 2-4pm"
- "PI Planning 15-17 Oct"
- "Retrospective 12/3 9:30-11:00"

Date and time mentions are located with ordered pattern tables (first match
wins) and cut out of the original text; what remains is the title.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta

from core.config import DEFAULT_NATURAL_TYPE, MONTHS, NATURAL_TYPE_KEYWORDS
from models.events import EventDraft, EventType, NoDate, NoTitle, Parsed, ParseResult

_MON = (
    r"(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)


def _month(name: str) -> int:
    return MONTHS[name[:3].lower()]


@dataclass(frozen=True)
class DateMatch:
    start: date | None  # None when recognized but not resolvable
    end: date | None
    span: tuple[int, int]


@dataclass(frozen=True)
class TimeMatch:
    start_time: str | None  # None when out of range
    end_time: str | None
    span: tuple[int, int]


def format_date_safe(d: date) -> str:
    """ISO date built from local year/month/day, no timezone conversion."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def infer_natural_type(text: str) -> EventType | None:
    """Keyword scan over the whole input; None when nothing matches."""
    t = text.lower()
    for type_name, keywords in NATURAL_TYPE_KEYWORDS:
        if any(keyword in t for keyword in keywords):
            return EventType(type_name)
    return None


# =============================================================================
# DATE PATTERNS
# =============================================================================


def _day_range_month(m: re.Match, ref: date) -> tuple[date, date]:
    month = _month(m.group(3))
    return date(ref.year, month, int(m.group(1))), date(ref.year, month, int(m.group(2)))


def _numeric_range(m: re.Match, ref: date) -> tuple[date, date]:
    return (
        date(ref.year, int(m.group(1)), int(m.group(2))),
        date(ref.year, int(m.group(3)), int(m.group(4))),
    )


def _month_day_range(m: re.Match, ref: date) -> tuple[date, date]:
    month = _month(m.group(1))
    return date(ref.year, month, int(m.group(2))), date(ref.year, month, int(m.group(3)))


DATE_RANGE_PATTERNS: list[tuple[str, re.Pattern, Callable[[re.Match, date], tuple[date, date]]]] = [
    ("day_range_month", re.compile(rf"\b(\d{{1,2}})\s*-\s*(\d{{1,2}})\s+{_MON}\b", re.I), _day_range_month),
    ("numeric_range", re.compile(r"\b(\d{1,2})/(\d{1,2})\s*-\s*(\d{1,2})/(\d{1,2})\b"), _numeric_range),
    ("month_day_range", re.compile(rf"\b{_MON}\s+(\d{{1,2}})\s*-\s*(\d{{1,2}})\b", re.I), _month_day_range),
]


def _day_month(m: re.Match, ref: date) -> date:
    return date(ref.year, _month(m.group(2)), int(m.group(1)))


def _month_day(m: re.Match, ref: date) -> date:
    return date(ref.year, _month(m.group(1)), int(m.group(2)))


def _numeric_full(m: re.Match, ref: date) -> date:
    return date(int(m.group(3)), int(m.group(1)), int(m.group(2)))


def _numeric_short(m: re.Match, ref: date) -> date:
    return date(ref.year, int(m.group(1)), int(m.group(2)))


def _today(m: re.Match, ref: date) -> date:
    return ref


def _tomorrow(m: re.Match, ref: date) -> date:
    return ref + timedelta(days=1)


def _weekday(m: re.Match, ref: date) -> None:
    # Recognized but not resolved to a concrete day
    return None


SINGLE_DATE_PATTERNS: list[tuple[str, re.Pattern, Callable[[re.Match, date], date | None]]] = [
    ("day_month", re.compile(rf"\b(\d{{1,2}})\s+{_MON}\b", re.I), _day_month),
    ("month_day", re.compile(rf"\b{_MON}\s+(\d{{1,2}})\b(?!\s*[:/]|\s*(?:am|pm)\b)", re.I), _month_day),
    ("numeric_full", re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b"), _numeric_full),
    ("numeric_short", re.compile(r"\b(\d{1,2})/(\d{1,2})\b"), _numeric_short),
    ("today", re.compile(r"\btoday\b", re.I), _today),
    ("tomorrow", re.compile(r"\btomorrow\b", re.I), _tomorrow),
    ("weekday", re.compile(r"\b(monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b", re.I), _weekday),
]


def find_date(text: str, reference_date: date) -> DateMatch | None:
    """
    Locate the first date mention: ranges first, then single dates.

    Returns None when nothing date-like is present. A match whose
    components do not form a valid calendar date has start=None.
    """
    for _name, pattern, extract in DATE_RANGE_PATTERNS:
        m = pattern.search(text)
        if m:
            try:
                start, end = extract(m, reference_date)
            except ValueError:
                return DateMatch(None, None, m.span())
            if end < start:
                return DateMatch(None, None, m.span())
            return DateMatch(start, end if end != start else None, m.span())

    for _name, pattern, extract in SINGLE_DATE_PATTERNS:
        m = pattern.search(text)
        if m:
            try:
                day = extract(m, reference_date)
            except ValueError:
                day = None
            return DateMatch(day, None, m.span())

    return None


# =============================================================================
# TIME PATTERNS
# =============================================================================


def _to_24h(hour: int, meridiem: str | None) -> int:
    if meridiem:
        if not 1 <= hour <= 12:
            raise ValueError(f"Invalid 12-hour clock value: {hour}")
        if meridiem.lower() == "pm" and hour != 12:
            hour += 12
    elif not 0 <= hour <= 23:
        raise ValueError(f"Invalid hour: {hour}")
    return hour


def _hhmm(hour: int, minute: int = 0) -> str:
    if not 0 <= minute <= 59:
        raise ValueError(f"Invalid minute: {minute}")
    return f"{hour:02d}:{minute:02d}"


def _meridiem_range(m: re.Match) -> tuple[str, str | None]:
    return (
        _hhmm(_to_24h(int(m.group(1)), m.group(2))),
        _hhmm(_to_24h(int(m.group(3)), m.group(4))),
    )


def _hour_range(m: re.Match) -> tuple[str, str | None]:
    meridiem = m.group(3)
    return (
        _hhmm(_to_24h(int(m.group(1)), meridiem)),
        _hhmm(_to_24h(int(m.group(2)), meridiem)),
    )


def _clock_range(m: re.Match) -> tuple[str, str | None]:
    return (
        _hhmm(_to_24h(int(m.group(1)), None), int(m.group(2))),
        _hhmm(_to_24h(int(m.group(3)), None), int(m.group(4))),
    )


def _single_hour(m: re.Match) -> tuple[str, str | None]:
    return _hhmm(_to_24h(int(m.group(1)), m.group(2))), None


TIME_PATTERNS: list[tuple[str, re.Pattern, Callable[[re.Match], tuple[str, str | None]]]] = [
    ("meridiem_range", re.compile(r"(?<![\d:/])(\d{1,2})\s*(am|pm)\s*-\s*(\d{1,2})\s*(am|pm)\b", re.I), _meridiem_range),
    ("hour_range", re.compile(r"(?<![\d:/])(\d{1,2})\s*-\s*(\d{1,2})(?![\d:/])\s*(am|pm)?\b", re.I), _hour_range),
    ("clock_range", re.compile(r"(?<![\d:/])(\d{1,2}):(\d{2})\s*-\s*(\d{1,2}):(\d{2})\b"), _clock_range),
    ("single_hour", re.compile(r"(?<![\d:/])(\d{1,2})\s*(am|pm)\b", re.I), _single_hour),
]


def find_time(text: str) -> TimeMatch | None:
    """Locate the first time mention; only one pattern is ever used."""
    for _name, pattern, extract in TIME_PATTERNS:
        m = pattern.search(text)
        if m:
            try:
                start_time, end_time = extract(m)
            except ValueError:
                return TimeMatch(None, None, m.span())
            return TimeMatch(start_time, end_time, m.span())
    return None


# =============================================================================
# TITLE
# =============================================================================

_CONNECTOR_RE = re.compile(r"(?:\s+(?:on|at|from))?\s*$", re.I)


def _blank(text: str, span: tuple[int, int]) -> str:
    """Replace a span with spaces so other spans keep their offsets."""
    start, end = span
    return text[:start] + " " * (end - start) + text[end:]


def extract_title(text: str, spans: list[tuple[int, int]]) -> str:
    """Cut the given spans (and a connector word just before each) out of text."""
    for start, end in sorted(spans, reverse=True):
        head = _CONNECTOR_RE.sub("", text[:start])
        text = head + " " + text[end:]
    return re.sub(r"\s+", " ", text).strip()


# =============================================================================
# ENTRY POINTS
# =============================================================================


def parse_natural_language_result(text: str, *, reference_date: date | None = None) -> ParseResult:
    """
    Parse a sentence into Parsed(draft), NoDate or NoTitle.

    Type defaults to MEETING when no keyword matches. Times are kept only for
    single-day drafts.
    """
    ref = reference_date or date.today()
    source = text.strip()

    date_match = find_date(source, ref)
    spans = []
    remaining = source
    if date_match is not None:
        spans.append(date_match.span)
        remaining = _blank(source, date_match.span)

    time_match = find_time(remaining)
    if time_match is not None:
        spans.append(time_match.span)

    if date_match is None or date_match.start is None:
        return NoDate()

    title = extract_title(source, spans)
    if not title:
        return NoTitle()

    event_type = infer_natural_type(source) or EventType(DEFAULT_NATURAL_TYPE)
    if date_match.end is not None:
        return Parsed(EventDraft.multi_day(event_type, title, date_match.start, date_match.end))

    start_time = end_time = None
    if time_match is not None:
        start_time, end_time = time_match.start_time, time_match.end_time
    return Parsed(EventDraft.single_day(event_type, title, date_match.start, start_time, end_time))


def parse_natural_language(text: str, *, reference_date: date | None = None) -> EventDraft | None:
    """Convenience wrapper: the draft, or None when the input needs rephrasing."""
    result = parse_natural_language_result(text, reference_date=reference_date)
    if isinstance(result, Parsed):
        return result.draft
    return None
