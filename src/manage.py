"""Marketplace database management CLI.

Creates or drops the SQL schema derived from the marketplace aggregates.
Only SQL providers (postgresql, sqlite) are touched; set PROTEAN_ENV to pick
the configuration overlay.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db
    PROTEAN_ENV=production python src/manage.py drop-db
"""

import argparse
import sys


def setup_database():
    from marketplace.api import routes  # noqa: F401
    from marketplace.domain import marketplace
    from marketplace.utils.db import setup_db

    print("Initializing marketplace domain...")
    marketplace.init()
    print("Creating database schema...")
    setup_db(marketplace)
    print("Done.")


def drop_database():
    from marketplace.api import routes  # noqa: F401
    from marketplace.domain import marketplace
    from marketplace.utils.db import drop_db

    print("Initializing marketplace domain...")
    marketplace.init()
    print("Dropping database schema...")
    drop_db(marketplace)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Marketplace database management")
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
