"""Base repository providing generic CRUD operations for Oracle DB."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

import oracledb

logger = logging.getLogger(__name__)

SLOW_QUERY_THRESHOLD_MS = 100  # Log queries slower than this


class BaseRepository:
    """Generic repository with CRUD operations using python-oracledb.

    Entity repositories extend this class and set ``table_name`` and
    ``id_column``. ``pool`` is anything with an ``acquire()`` method
    returning a DB-API connection (the ``Database`` handle in production).
    """

    def __init__(
        self,
        pool: Any,
        table_name: str,
        id_column: str,
    ) -> None:
        self.pool = pool
        self.table_name = table_name
        self.id_column = id_column

    # ── helpers ──────────────────────────────────────────────────────

    def _acquire(self) -> Any:
        return self.pool.acquire()

    @staticmethod
    def _log_query(sql: str, elapsed_ms: float) -> None:
        """Log query timing; warn if above slow-query threshold."""
        if elapsed_ms > SLOW_QUERY_THRESHOLD_MS:
            logger.warning("SLOW QUERY (%.1fms): %s", elapsed_ms, sql[:200])
        else:
            logger.debug("Query (%.1fms): %s", elapsed_ms, sql[:200])

    @staticmethod
    def _generate_id() -> str:
        return uuid.uuid4().hex

    @staticmethod
    def _convert_row(row: dict[str, Any]) -> dict[str, Any]:
        """Read CLOB columns into plain strings."""
        return {k: (v.read() if isinstance(v, oracledb.LOB) else v) for k, v in row.items()}

    def _fetch(self, sql: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        """Run a SELECT and return rows as dicts keyed by lower-case column."""
        conn = self._acquire()
        try:
            with conn.cursor() as cur:
                start = time.perf_counter()
                cur.execute(sql, params)
                columns = [col[0].lower() for col in (cur.description or [])]
                rows = [
                    self._convert_row(dict(zip(columns, row, strict=True)))
                    for row in cur.fetchall()
                ]
                self._log_query(sql, (time.perf_counter() - start) * 1000)
                return rows
        finally:
            conn.close()

    def _execute(self, sql: str, params: dict[str, Any]) -> int:
        """Run a DML statement, commit, and return rows affected."""
        conn = self._acquire()
        try:
            with conn.cursor() as cur:
                start = time.perf_counter()
                cur.execute(sql, params)
                conn.commit()
                self._log_query(sql, (time.perf_counter() - start) * 1000)
                return int(cur.rowcount)
        finally:
            conn.close()

    # ── read ─────────────────────────────────────────────────────────

    def find_by_id(self, entity_id: str) -> dict[str, Any] | None:
        """Return a single row by primary key, or ``None``."""
        sql = f"SELECT * FROM {self.table_name} WHERE {self.id_column} = :id"
        rows = self._fetch(sql, {"id": entity_id})
        return rows[0] if rows else None

    def find_by_field(
        self,
        field: str,
        value: Any,
        order_by: str | None = None,
    ) -> list[dict[str, Any]]:
        """Return all rows matching a single field value."""
        sql = f"SELECT * FROM {self.table_name} WHERE {field} = :val"
        if order_by:
            sql += f" ORDER BY {order_by}"
        return self._fetch(sql, {"val": value})

    # ── write ────────────────────────────────────────────────────────

    def create(
        self,
        data: dict[str, Any],
        new_id: str | None = None,
    ) -> str:
        """Insert a new row and return its ID.

        The ID is either supplied via *new_id* or auto-generated.
        """
        if new_id is None:
            new_id = self._generate_id()

        all_data = {self.id_column: new_id, **data}
        columns = ", ".join(all_data.keys())
        placeholders = ", ".join(f":{k}" for k in all_data)
        sql = f"INSERT INTO {self.table_name} ({columns}) VALUES ({placeholders})"
        self._execute(sql, all_data)
        return new_id
