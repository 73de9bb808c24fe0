"""Wait for the Oracle database to accept connections, then run migrations.

Usage:
    python -m scripts.wait_for_db [--timeout 300] [--reset]
"""

from __future__ import annotations

import argparse
import logging
import time

import oracledb

from lotterypay.core.config import Settings
from lotterypay.core.logging import setup_logging

logger = logging.getLogger(__name__)


def wait_for_db(
    dsn: str,
    user: str,
    password: str,
    timeout: int = 300,
    interval: int = 5,
) -> oracledb.Connection:
    """Block until Oracle accepts connections, then return a connection."""
    deadline = time.monotonic() + timeout
    attempt = 0
    while time.monotonic() < deadline:
        attempt += 1
        try:
            conn = oracledb.connect(user=user, password=password, dsn=dsn)
            logger.info("Connected to Oracle on attempt %d", attempt)
            return conn
        except oracledb.Error as exc:
            logger.info("Attempt %d failed (%s), retrying in %ds...", attempt, exc, interval)
            time.sleep(interval)

    raise TimeoutError(f"Could not connect to Oracle at {dsn} within {timeout}s")


def main() -> None:
    parser = argparse.ArgumentParser(description="Wait for Oracle and apply migrations")
    parser.add_argument("--timeout", type=int, default=300)
    parser.add_argument("--reset", action="store_true", help="Drop all tables first")
    args = parser.parse_args()

    settings = Settings()
    setup_logging(level=settings.log_level, log_format=settings.log_format)

    conn = wait_for_db(
        settings.oracle_dsn, settings.oracle_user, settings.oracle_password, args.timeout
    )

    from scripts.migrations import drop_all_tables, run_migrations

    try:
        if args.reset:
            logger.info("Dropped: %s", drop_all_tables(conn))
        actions = run_migrations(conn)
        if actions:
            logger.info("Migrations applied: %s", actions)
        else:
            logger.info("No pending migrations")
    finally:
        conn.close()
    logger.info("Database ready!")


if __name__ == "__main__":
    main()
