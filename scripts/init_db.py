#!/usr/bin/env python3
"""
Drop and recreate the employee-management schema.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --verbose

Exit code 0 on success, 1 on connection failure or when the DDL transaction
was rolled back.
"""

import argparse
import logging
import sys

from dotenv import load_dotenv
from sqlalchemy.exc import OperationalError

# Load environment variables
load_dotenv()

from app.core.config import settings
from app.core.errors import SchemaInitError
from app.core.logging import configure_logging
from app.db.schema import initialize_schema

logger = logging.getLogger("init_db")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Drop and recreate all tables, constraints and indexes")
    parser.add_argument("--verbose", "-v", action="store_true", help="Echo log output to the console")
    args = parser.parse_args(argv)

    configure_logging(
        settings.LOG_LEVEL,
        settings.LOG_DIR,
        console_level=logging.INFO if args.verbose else logging.WARNING,
    )

    # Imported late so the engine is only built once logging is in place
    from app.db.session import engine

    print("=" * 60)
    print(f"Initializing database: {engine.url.database}")
    print("=" * 60)

    try:
        summary = initialize_schema(engine)
    except OperationalError as e:
        logger.error("Could not connect to database", exc_info=e)
        print(f"\n❌ Connection failed: {e.orig if e.orig is not None else e}")
        return 1
    except SchemaInitError as e:
        print(f"\n❌ Schema initialization failed at step '{e.step}', transaction rolled back")
        print(f"   {e.cause}")
        return 1

    print()
    for step, n in summary.items():
        print(f"  ✓ {step}: {n}")
    print("\n✓ Database initialized")
    return 0


if __name__ == "__main__":
    sys.exit(main())
