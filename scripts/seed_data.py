#!/usr/bin/env python3
"""
Fill a freshly initialized database with synthetic employees, salaries,
projects, attendance and trainings.

Usage:
    python scripts/seed_data.py
    python scripts/seed_data.py --employees 2000 --target-rows 0
    python scripts/seed_data.py --seed 42 --as-of 2024-06-30 --verbose

Everything runs in one transaction. Exit code 0 on success, 1 on connection
failure or rollback.
"""

import argparse
import logging
import random
import sys
from datetime import date

from dotenv import load_dotenv
from sqlalchemy.exc import OperationalError

# Load environment variables
load_dotenv()

from app.core.config import settings
from app.core.errors import SeedError
from app.core.logging import configure_logging
from app.seed.seeder import SeedConfig, run_seed

logger = logging.getLogger("seed_data")


def build_parser() -> argparse.ArgumentParser:
    defaults = SeedConfig()
    parser = argparse.ArgumentParser(description="Seed the employee-management database")
    parser.add_argument("--employees", type=int, default=defaults.total_employees, help="Total employees, managers included")
    parser.add_argument("--managers", type=int, default=defaults.manager_count, help="Employees inserted in the manager phase")
    parser.add_argument("--departments", type=int, default=defaults.department_count, help="How many catalog departments to use")
    parser.add_argument("--attendance-days", type=int, default=defaults.attendance_window_days, help="Trailing window for attendance, in days")
    parser.add_argument("--target-rows", type=int, default=defaults.target_rows, help="Backfill attendance up to this many rows overall (0 disables)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible run")
    parser.add_argument("--as-of", type=date.fromisoformat, default=None, help="Treat this date (YYYY-MM-DD) as today")
    parser.add_argument("--verbose", "-v", action="store_true", help="Echo log output to the console")
    return parser


def config_from_args(args: argparse.Namespace) -> SeedConfig:
    kwargs = dict(
        department_count=args.departments,
        manager_count=args.managers,
        total_employees=args.employees,
        attendance_window_days=args.attendance_days,
        target_rows=args.target_rows,
    )
    if args.as_of is not None:
        kwargs["as_of"] = args.as_of
    return SeedConfig(**kwargs)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        settings.LOG_LEVEL,
        settings.LOG_DIR,
        console_level=logging.INFO if args.verbose else logging.WARNING,
    )

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    from app.db.session import engine

    print("=" * 60)
    print(f"Seeding database: {engine.url.database}")
    print("=" * 60)

    try:
        run = run_seed(engine, config, random.Random(args.seed))
    except OperationalError as e:
        logger.error("Could not connect to database", exc_info=e)
        print(f"\n❌ Connection failed: {e.orig if e.orig is not None else e}")
        return 1
    except SeedError as e:
        print(f"\n❌ Seeding failed during '{e.phase}' after {e.rows_inserted} rows, transaction rolled back")
        print(f"   {e.cause}")
        return 1

    print("\n=== Seed Summary ===")
    for table, n in run.counts.items():
        print(f"{table + ':':<20} {n}")
    print(f"\nTotal rows: {run.total_rows}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
