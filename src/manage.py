"""UnitFlow database management CLI.

Creates and drops the on-device schema using the setup_db/drop_db utilities
of the unitflow domain. Only meaningful with PROTEAN_ENV=production, where
the default database is SQLite.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    """Create the database schema for the unitflow domain."""
    from unitflow.domain import unitflow
    from unitflow.utils.db import setup_db

    print("Initializing unitflow domain...")
    unitflow.init()
    print("Creating unitflow database schema...")
    setup_db(unitflow)
    print("  unitflow schema ready.")

    print("Done.")


def drop_database():
    """Drop the database schema for the unitflow domain."""
    from unitflow.domain import unitflow
    from unitflow.utils.db import drop_db

    print("Initializing unitflow domain...")
    unitflow.init()
    print("Dropping unitflow database schema...")
    drop_db(unitflow)
    print("  unitflow schema dropped.")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="UnitFlow database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
