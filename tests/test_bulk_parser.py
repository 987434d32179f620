"""
Tests for bulk (one event per line) text import.
"""

from datetime import date

import pytest
from generate_events import generate_lines

from models.events import EventType
from services.bulk_parser import (
    clean_title,
    expand_days,
    guess_type,
    normalize_line,
    parse_bulk_text,
    parse_bulk_with_report,
    parse_line_to_events,
    parse_single_date,
)

JULY_2025 = (date(2025, 7, 1), date(2025, 7, 31))


class TestNormalizeLine:
    def test_spaced_dashes_become_canonical(self):
        assert normalize_line("Jul 28 – Aug 1, 2025") == "Jul 28 - Aug 1, 2025"
        assert normalize_line("Jul 28 -Aug 1, 2025") == "Jul 28 - Aug 1, 2025"

    def test_hyphenated_words_are_kept(self):
        assert normalize_line("Pre-socialization Sep 3, 2025") == "Pre-socialization Sep 3, 2025"

    def test_parentheticals_removed(self):
        assert normalize_line("PI Planning Session (2-day workshop) July 21, 2025 (Mon)") == (
            "PI Planning Session July 21, 2025"
        )


class TestCleanTitle:
    def test_dangling_week_of_removed(self):
        assert clean_title("Commit Documentation Week of ") == "Commit Documentation"

    def test_unclosed_trailing_paren_removed(self):
        assert clean_title("Offsite (tentative") == "Offsite"


class TestGuessType:
    @pytest.mark.parametrize(
        "title,expected",
        [
            ("Finance Monthly Review", EventType.MONTHLY_REVIEW),
            ("Thanksgiving Holiday", EventType.HOLIDAYS),
            ("Annual Leave", EventType.HOLIDAYS),
            ("Product Mngt Leader Review", EventType.MEETING),
            ("PI Planning Kickoff", EventType.MEETING),
            ("Commit Documentation", EventType.PLANNING),
        ],
    )
    def test_keywords(self, title, expected):
        assert guess_type(title) == expected

    def test_holiday_checked_before_meeting(self):
        assert guess_type("Holiday Party Meeting") == EventType.HOLIDAYS


class TestParseLineToEvents:
    def test_same_month_range(self):
        drafts = parse_line_to_events("Product Mngt Leader Review July 9-10, 2025 (Wed-Thu)")

        assert len(drafts) == 1
        draft = drafts[0]
        assert draft.title == "Product Mngt Leader Review"
        assert draft.type == EventType.MEETING
        assert draft.to_dict() == {
            "type": "MEETING",
            "title": "Product Mngt Leader Review",
            "date": "2025-07-09",
            "startDate": "2025-07-09",
            "endDate": "2025-07-10",
        }

    def test_cross_month_range(self):
        drafts = parse_line_to_events(
            "Commit Documentation Week of July 28 - Aug 1, 2025 (Mon-Fri)"
        )

        assert len(drafts) == 1
        assert drafts[0].title == "Commit Documentation"
        assert drafts[0].type == EventType.PLANNING
        assert drafts[0].start_date == date(2025, 7, 28)
        assert drafts[0].end_date == date(2025, 8, 1)

    def test_cross_year_range_starts_in_previous_year(self):
        drafts = parse_line_to_events("Annual Leave Dec 22 - Jan 2, 2026")

        assert drafts[0].start_date == date(2025, 12, 22)
        assert drafts[0].end_date == date(2026, 1, 2)
        assert drafts[0].type == EventType.HOLIDAYS

    def test_single_date(self):
        drafts = parse_line_to_events("PI Planning Kickoff July 1, 2025 (Tue)")

        assert len(drafts) == 1
        assert drafts[0].title == "PI Planning Kickoff"
        assert drafts[0].date == date(2025, 7, 1)
        assert not drafts[0].is_multi_day
        assert "endDate" not in drafts[0].to_dict()

    def test_parenthetical_inside_title(self):
        drafts = parse_line_to_events(
            "PI Planning Session (2-day workshop) Week of July 21-24, 2025 (Mon-Thu)"
        )

        assert drafts[0].title == "PI Planning Session"
        assert drafts[0].start_date == date(2025, 7, 21)
        assert drafts[0].end_date == date(2025, 7, 24)

    def test_week_of_single_date_spans_work_week(self):
        drafts = parse_line_to_events("Sprint Week of Sep 8, 2025")

        assert drafts[0].title == "Sprint"
        assert drafts[0].start_date == date(2025, 9, 8)
        assert drafts[0].end_date == date(2025, 9, 12)

    def test_missing_title_defaults(self):
        drafts = parse_line_to_events("July 4, 2025")

        assert drafts[0].title == "Event"
        assert drafts[0].type == EventType.PLANNING

    def test_missing_year_comes_from_reference_date(self):
        drafts = parse_line_to_events("Design Sync Sep 3", reference_date=date(2026, 1, 10))

        assert drafts[0].date == date(2026, 9, 3)

    def test_no_date_yields_nothing(self):
        assert parse_line_to_events("Team offsite planning notes") == []

    def test_blank_line_yields_nothing(self):
        assert parse_line_to_events("   ") == []

    def test_invalid_date_is_reported_and_skipped(self, capsys):
        assert parse_line_to_events("Budget Alignment Feb 30, 2026") == []

        out = capsys.readouterr().out
        assert "Date parsing error" in out
        assert "Budget Alignment Feb 30, 2026" in out

    def test_parsing_is_repeatable(self):
        line = "Commit Documentation Week of July 28 - Aug 1, 2025 (Mon-Fri)"
        assert parse_line_to_events(line) == parse_line_to_events(line)


class TestDateShapes:
    """Only recognizable date shapes produce a date; stray numbers do not."""

    @pytest.mark.parametrize(
        "line",
        [
            "Sprint 12 demo",
            "Top 5 priorities",
            "Release v2 planning",
            "Q3 roadmap",
            "Room 101 review",
            "May roadmap 2026",
        ],
    )
    def test_numbers_without_a_date_yield_nothing(self, line, reference_date, capsys):
        assert parse_line_to_events(line, reference_date=reference_date) == []
        assert capsys.readouterr().out == ""

    def test_range_without_comma_before_year(self, reference_date):
        drafts = parse_line_to_events("Conf Oct 2-3 2025", reference_date=reference_date)

        assert len(drafts) == 1
        assert drafts[0].title == "Conf"
        assert drafts[0].start_date == date(2025, 10, 2)
        assert drafts[0].end_date == date(2025, 10, 3)

    def test_cross_month_range_without_comma(self):
        drafts = parse_line_to_events("Commit Documentation Jul 28 - Aug 1 2025")

        assert drafts[0].start_date == date(2025, 7, 28)
        assert drafts[0].end_date == date(2025, 8, 1)

    def test_trailing_text_after_date_is_ignored(self, reference_date):
        drafts = parse_line_to_events(
            "PI Planning Kickoff July 1, 2025 Room 4", reference_date=reference_date
        )

        assert len(drafts) == 1
        assert drafts[0].title == "PI Planning Kickoff"
        assert drafts[0].date == date(2025, 7, 1)

    def test_month_word_inside_title(self, reference_date):
        drafts = parse_line_to_events("May Day Holiday May 1, 2026", reference_date=reference_date)

        assert len(drafts) == 1
        assert drafts[0].title == "May Day Holiday"
        assert drafts[0].type == EventType.HOLIDAYS
        assert drafts[0].date == date(2026, 5, 1)

    def test_year_without_comma(self, reference_date):
        drafts = parse_line_to_events("Offsite Mar 4 2026", reference_date=reference_date)

        assert drafts[0].date == date(2026, 3, 4)

    @pytest.mark.parametrize("line", ["Launch 2025-09-03", "Launch 9/3/2025"])
    def test_numeric_dates(self, line, reference_date):
        drafts = parse_line_to_events(line, reference_date=reference_date)

        assert len(drafts) == 1
        assert drafts[0].title == "Launch"
        assert drafts[0].date == date(2025, 9, 3)

    def test_invalid_numeric_date_is_reported(self, capsys):
        assert parse_line_to_events("Launch 2025-02-30") == []

        assert "Date parsing error" in capsys.readouterr().out


class TestParseBulkText:
    def test_keeps_input_order(self, bulk_sample):
        drafts = parse_bulk_text(bulk_sample, clip_to_operating_year=False)

        assert [d.title for d in drafts] == [
            "PI Planning Kickoff",
            "Product Mngt Leader Review",
            "PI Planning Session",
            "Commit Documentation",
        ]

    def test_clip_uses_operating_window(self, bulk_sample):
        window = (date(2025, 7, 5), date(2025, 7, 31))

        clipped = parse_bulk_text(bulk_sample, operating_window=window)
        unclipped = parse_bulk_text(
            bulk_sample, clip_to_operating_year=False, operating_window=window
        )

        assert len(clipped) == 3
        assert all(window[0] <= d.date <= window[1] for d in clipped)
        assert len(unclipped) == 4

    def test_clip_window_is_inclusive(self):
        text = "Start July 1, 2025\nEnd July 31, 2025\nAfter Aug 1, 2025"

        drafts = parse_bulk_text(text, operating_window=JULY_2025)

        assert [d.title for d in drafts] == ["Start", "End"]

    def test_default_window_is_operating_year(self):
        text = "Before July 31, 2025\nFirst Aug 1, 2025\nLast July 31, 2026\nAfter Aug 1, 2026"

        drafts = parse_bulk_text(text)

        assert [d.title for d in drafts] == ["First", "Last"]

    def test_crlf_and_blank_lines(self):
        text = "Alpha July 1, 2025\r\n\r\nBeta July 2, 2025\r\n"

        drafts = parse_bulk_text(text, operating_window=JULY_2025)

        assert [d.title for d in drafts] == ["Alpha", "Beta"]

    def test_bad_line_does_not_abort_batch(self):
        text = "Good July 1, 2025\nBroken Feb 30, 2026\nAlso Good July 2, 2025"

        drafts = parse_bulk_text(text, clip_to_operating_year=False)

        assert [d.title for d in drafts] == ["Good", "Also Good"]

    def test_report_counts_skipped_lines(self):
        text = "Good July 1, 2025\n\nno date here\nBroken Feb 30, 2026\n"

        drafts, received, skipped = parse_bulk_with_report(text, clip_to_operating_year=False)

        assert len(drafts) == 1
        assert received == 3
        assert skipped == ["no date here", "Broken Feb 30, 2026"]


class TestGeneratedText:
    """Checks against Faker-generated lines with known answers."""

    def test_at_most_one_draft_per_line(self):
        lines = generate_lines(60, seed=7)
        text = "\n\n".join(line.text for line in lines) + "\nnothing to see\n"

        drafts = parse_bulk_text(text, clip_to_operating_year=False)
        non_empty = [ln for ln in text.splitlines() if ln.strip()]

        assert len(drafts) <= len(non_empty)
        assert len(drafts) == len(lines)

    def test_each_line_parses_to_expected_draft(self):
        for line in generate_lines(60, seed=11):
            drafts = parse_line_to_events(line.text)

            assert len(drafts) == 1, line.text
            draft = drafts[0]
            assert draft.title == line.title, line.text
            assert draft.type.value == line.type, line.text
            assert draft.date == line.start, line.text
            if line.end != line.start:
                assert draft.end_date == line.end, line.text
            else:
                assert draft.end_date is None, line.text

    def test_generated_lines_fall_in_operating_year(self):
        lines = generate_lines(30, seed=3)
        text = "\n".join(line.text for line in lines)

        assert parse_bulk_text(text) == parse_bulk_text(text, clip_to_operating_year=False)


class TestHelpers:
    def test_expand_days_inclusive(self):
        days = expand_days(date(2025, 12, 30), date(2026, 1, 2))
        assert days == [date(2025, 12, 30), date(2025, 12, 31), date(2026, 1, 1), date(2026, 1, 2)]

    def test_expand_days_rejects_inverted_range(self):
        with pytest.raises(ValueError):
            expand_days(date(2025, 9, 5), date(2025, 9, 1))

    def test_single_date_needs_a_digit(self):
        assert parse_single_date("sometime in spring") is None

    def test_single_date_iso(self):
        assert parse_single_date("2025-09-03") == date(2025, 9, 3)

    def test_single_date_ignores_bare_numbers(self):
        assert parse_single_date("Sprint 12 demo", date(2025, 10, 15)) is None

    def test_single_date_takes_only_the_matched_text(self):
        assert parse_single_date("Sep 3 Room 4", date(2025, 10, 15)) == date(2025, 9, 3)
