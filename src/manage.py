"""OrderDesk database management CLI.

Usage:
    python src/manage.py setup-db   # Create order tables
    python src/manage.py drop-db    # Drop order tables
"""

import argparse
import sys


def setup_database():
    """Create the order schema in the configured database."""
    from ordering.domain import ordering
    from ordering.utils.db import setup_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Creating ordering database schema...")
    setup_db(ordering)
    print("Done.")


def drop_database():
    """Drop the order schema from the configured database."""
    from ordering.domain import ordering
    from ordering.utils.db import drop_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Dropping ordering database schema...")
    drop_db(ordering)
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="OrderDesk database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
