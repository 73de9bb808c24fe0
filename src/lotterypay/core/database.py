"""Oracle connection pool handle.

The pool is owned by a ``Database`` instance created at startup and passed to
the repositories; there is no module-level pool.
"""

from __future__ import annotations

import logging
from typing import Any

import oracledb

from lotterypay.core.config import Settings

logger = logging.getLogger(__name__)


class Database:
    """Explicitly opened/closed wrapper around an ``oracledb`` pool."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._pool: oracledb.ConnectionPool | None = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self) -> Database:
        """Create the connection pool. Calling twice is a no-op."""
        if self._pool is not None:
            return self

        # Amounts are NUMBER(10,2); fetch them as Decimal, not float
        oracledb.defaults.fetch_decimals = True

        logger.info("Creating Oracle connection pool: %s", self.settings.oracle_dsn)
        self._pool = oracledb.create_pool(
            user=self.settings.oracle_user,
            password=self.settings.oracle_password,
            dsn=self.settings.oracle_dsn,
            min=self.settings.oracle_pool_min,
            max=self.settings.oracle_pool_max,
            increment=self.settings.oracle_pool_increment,
        )
        logger.info(
            "Oracle connection pool created (min=%d, max=%d)",
            self.settings.oracle_pool_min,
            self.settings.oracle_pool_max,
        )
        return self

    def close(self) -> None:
        if self._pool is not None:
            self._pool.close(force=True)
            self._pool = None
            logger.info("Oracle connection pool closed")

    def acquire(self) -> Any:
        """Acquire a connection. Raises if the pool was never opened."""
        if self._pool is None:
            raise RuntimeError("Database is not open. Call open() first.")
        return self._pool.acquire()

    def ping(self) -> None:
        """Run a trivial query; raises on any database error."""
        conn = self.acquire()
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 FROM DUAL")
                cur.fetchone()
        finally:
            conn.close()

    def __enter__(self) -> Database:
        return self.open()

    def __exit__(self, *args: Any) -> None:
        self.close()
