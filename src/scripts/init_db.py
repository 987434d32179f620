#!/usr/bin/env python3
"""Create the PI calendar SQLite3 database with events and request log tables."""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core import database


def create_database():
    """Create the database and tables if they don't exist."""
    # Ensure directory exists
    database.DB_PATH.parent.mkdir(parents=True, exist_ok=True)

    conn = database.get_connection()
    conn.execute("PRAGMA foreign_keys = ON")
    database.create_schema(conn)
    conn.close()
    print(f"Database created successfully at: {database.DB_PATH}")


if __name__ == "__main__":
    create_database()
