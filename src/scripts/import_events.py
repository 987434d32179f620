#!/usr/bin/env python3
"""
Import pasted calendar text into the events database.

Each line of the input file is parsed with the bulk parser. Lines without
a recognizable date are reported and skipped.

Usage:
    uv run python src/scripts/import_events.py calendar.txt
    uv run python src/scripts/import_events.py calendar.txt --no-clip --dry-run
"""

import argparse
import sys
import traceback
from datetime import datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core import database
from models.events import EventDraft
from services.bulk_parser import parse_bulk_with_report


def describe_draft(draft: EventDraft) -> str:
    """One-line preview of a draft."""
    when = draft.date.isoformat()
    if draft.is_multi_day:
        when = f"{draft.start_date.isoformat()} to {draft.end_date.isoformat()}"
    elif draft.start_time:
        when += f" {draft.start_time}"
        if draft.end_time:
            when += f"-{draft.end_time}"
    return f"[{draft.type.value}] {draft.title} ({when})"


def main(
    input_path: Path,
    clip: bool = True,
    dry_run: bool = False,
    reference: str | None = None,
) -> int:
    """Main entry point. Returns the number of events stored."""
    try:
        reference_date = datetime.strptime(reference, "%Y-%m-%d").date() if reference else None
        text = input_path.read_text(encoding="utf-8")

        # 1. Parse
        drafts, received, skipped = parse_bulk_with_report(
            text, clip_to_operating_year=clip, reference_date=reference_date
        )
        print(f"Read {received} line(s) from {input_path}")
        print(f"Parsed {len(drafts)} event(s)")
        if skipped:
            print(f"\nSkipped {len(skipped)} line(s) with no date:")
            for line in skipped:
                print(f"  {line}")

        # 2. Preview
        print()
        for draft in drafts:
            print(f"  {describe_draft(draft)}")

        if dry_run:
            print("\nDry run, nothing stored.")
            return 0

        # 3. Store
        database.DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        conn = database.get_connection()
        try:
            database.create_schema(conn)
            for draft in drafts:
                database.create_event(conn, draft.to_event_data())
        finally:
            conn.close()

        print(f"\nStored {len(drafts)} event(s) in {database.DB_PATH}")
        return len(drafts)

    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import pasted calendar text as events")
    parser.add_argument("file", type=Path, help="Text file with one event per line")
    parser.add_argument(
        "--no-clip",
        action="store_true",
        help="Keep events outside the operating year",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and preview without writing to the database",
    )
    parser.add_argument(
        "--reference-date",
        help="Date (YYYY-MM-DD) used to fill in missing years. Defaults to today.",
    )
    args = parser.parse_args()

    main(args.file, clip=not args.no_clip, dry_run=args.dry_run, reference=args.reference_date)
