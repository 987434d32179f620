#!/usr/bin/env python3
"""
Print the week rows and event lanes of a month from the events database.

Usage:
    uv run python src/scripts/show_month_layout.py --month 2025-11
"""

import argparse
import sys
from datetime import date, datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core import database
from services.calendar import layout_month, quarter_of


def print_week(week: dict):
    days = week["days"]
    print(f"\nWeek of {days[0]['date'].isoformat()} ({week['maxLanes']} lane(s))")

    for placed in sorted(week["spanning"], key=lambda p: p["lane"]):
        geometry = placed["geometry"]
        row = ["   "] * len(days)
        for i in range(geometry.start_index, geometry.start_index + geometry.span_days):
            row[i] = "###"
        print(f"  lane {placed['lane']}: {' '.join(row)}  {placed['event']['title']}")

    for day in days:
        if not day["events"]:
            continue
        marker = "" if day["inMonth"] else " (other month)"
        titles = ", ".join(e["title"] for e in day["events"])
        more = f" +{day['hiddenCount']} more" if day["hiddenCount"] else ""
        print(f"  {day['date'].strftime('%a %m/%d')}{marker}: {titles}{more}")


def main(month_str: str | None = None):
    """Main entry point."""
    if month_str:
        first = datetime.strptime(month_str, "%Y-%m").date()
    else:
        first = date.today().replace(day=1)

    conn = database.get_connection()
    try:
        events = database.list_events(conn)
    finally:
        conn.close()

    print(f"{first.strftime('%B %Y')} ({quarter_of(first)}), {len(events)} stored event(s)")
    for week in layout_month(events, first.year, first.month):
        print_week(week)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Show the lane layout of a calendar month")
    parser.add_argument("--month", help="Month to show (YYYY-MM). Defaults to the current month.")
    args = parser.parse_args()

    main(args.month)
