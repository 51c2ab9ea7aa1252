#!/usr/bin/env python3
"""Seed the employee store from the randomuser.me API.

Run from the backend/ directory:

    python3 scripts/seed.py [--count N] [--dry-run] [--verbose]

The seed pass only writes when the store is empty; a populated store is left
untouched. ``--dry-run`` fetches, maps and de-duplicates the batch and reports
what would be inserted without writing anything.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from employee_directory.core.config import Settings  # noqa: E402
from employee_directory.services.employee_service import build_employee_service, dedupe_by_email  # noqa: E402
from employee_directory.services.exceptions import ExternalApiError  # noqa: E402
from employee_directory.services.mapper import EmployeeMapper  # noqa: E402
from employee_directory.services.random_user_client import RandomUserClient  # noqa: E402

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Seed the employee directory from the randomuser.me API",
    )
    parser.add_argument(
        "--count",
        type=positive_int,
        default=None,
        help="Number of raw records to request (default: SEED_BATCH_SIZE)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and map records without writing to the store",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return parser.parse_args(argv)


async def dry_run(settings: Settings, count: int) -> int:
    client = RandomUserClient.from_settings(settings)
    mapper = EmployeeMapper()

    raw_users = await client.fetch_raw_employees(count)
    employees = dedupe_by_email([mapper.to_entity(user) for user in raw_users])

    logger.info("Fetched %d records, %d unique by email", len(raw_users), len(employees))
    for employee in employees:
        logger.debug(
            "%s %s <%s> — %s / %s (%s)",
            employee.first_name,
            employee.last_name,
            employee.email,
            employee.department,
            employee.job_title,
            employee.location,
        )
    logger.info("[DRY RUN] No employees were written.")
    return len(employees)


async def seed(args: argparse.Namespace, settings: Settings | None = None) -> int:
    settings = settings or Settings()
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    count = args.count if args.count is not None else settings.SEED_BATCH_SIZE
    if args.dry_run:
        return await dry_run(settings, count)

    if not settings.cosmos_configured:
        logger.warning("Cosmos DB is not configured; seeding an in-memory store has no lasting effect.")

    service = await build_employee_service(settings)
    try:
        inserted = await service.seed_database(count)
    finally:
        await service.close()

    logger.info("Seed complete: %d employees inserted", inserted)
    return inserted


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        asyncio.run(seed(args))
    except ExternalApiError as e:
        logger.error("Seeding aborted: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
