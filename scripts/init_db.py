#!/usr/bin/env python3
"""Create the Students table in a development or test database."""

import argparse
import sys
from pathlib import Path

# Add functions to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "functions"))

from shared.config import SQL_CONNECTION_STRING_SETTING, get_env
from shared.db.connection import get_db_cursor
from shared.db.models import CHECK_SCHEMA_SQL, DROP_SCHEMA_SQL, SCHEMA_SQL


def init_database(connection_string: str, reset: bool = False, cursor_factory=get_db_cursor) -> bool:
    """Create the Students table if it does not exist.

    Args:
        connection_string: ODBC connection string for Azure SQL
        reset: Drop the table first
        cursor_factory: Cursor context manager factory

    Returns:
        True if the table was created, False if it already existed
    """
    print("Initializing student database...")

    if reset:
        with cursor_factory(connection_string) as cursor:
            print("  Dropping Students table...")
            cursor.execute(DROP_SCHEMA_SQL)

    with cursor_factory(connection_string) as cursor:
        cursor.execute(CHECK_SCHEMA_SQL)
        if cursor.fetchone()[0] > 0:
            print("  Students table already exists, nothing to do.")
            return False

        print("  Creating Students table...")
        cursor.execute(SCHEMA_SQL)

    print("\nDatabase initialization complete!")
    return True


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reset", action="store_true", help="drop the Students table first")
    args = parser.parse_args(argv)

    try:
        init_database(get_env(SQL_CONNECTION_STRING_SETTING), reset=args.reset)
    except Exception as e:
        print(f"\nError: {e}")
        print("\nTroubleshooting:")
        print(f"  1. Check your .env file sets {SQL_CONNECTION_STRING_SETTING}")
        print("  2. Ensure your IP is allowed in the Azure SQL firewall")
        print("  3. Verify ODBC Driver 18 for SQL Server is installed")
        sys.exit(1)


if __name__ == "__main__":
    main()
