"""Playground database management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    """Create the database schema for the playground domain."""
    from playground.domain import playground
    from playground.utils.db import setup_db

    print("Initializing playground domain...")
    playground.init()
    print("Creating playground database schema...")
    setup_db(playground)
    print("Done.")


def drop_database():
    """Drop the database schema for the playground domain."""
    from playground.domain import playground
    from playground.utils.db import drop_db

    print("Initializing playground domain...")
    playground.init()
    print("Dropping playground database schema...")
    drop_db(playground)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Playground database management")
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
