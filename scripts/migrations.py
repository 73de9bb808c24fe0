"""Database migrations for lotterypay.

Creates the ticket and payment tables and their lookup indexes. Safe to run
repeatedly: existing tables and indexes are skipped.
"""

from __future__ import annotations

import logging

import oracledb

from lotterypay.core.constants import TICKET_STATUSES

logger = logging.getLogger(__name__)


_STATUS_LIST = ", ".join(f"'{s}'" for s in TICKET_STATUSES)

MIGRATION_001_TICKETS = f"""
CREATE TABLE lottery_tickets (
    ticket_id           VARCHAR2(32) PRIMARY KEY,
    customer_email      VARCHAR2(255) NOT NULL,
    customer_name       VARCHAR2(255) NOT NULL,
    numbers             CLOB NOT NULL CHECK (numbers IS JSON),
    unit_count          NUMBER(3) NOT NULL CHECK (unit_count BETWEEN 1 AND 100),
    amount              NUMBER(10,2) NOT NULL CHECK (amount > 0),
    payment_reference   VARCHAR2(64),
    status              VARCHAR2(20) DEFAULT 'pending' NOT NULL
                        CHECK (status IN ({_STATUS_LIST})),
    created_at          TIMESTAMP DEFAULT SYSTIMESTAMP NOT NULL,
    paid_at             TIMESTAMP
)
"""

MIGRATION_001_PAYMENTS = """
CREATE TABLE payments (
    payment_id          VARCHAR2(32) PRIMARY KEY,
    external_reference  VARCHAR2(64) NOT NULL UNIQUE,
    ticket_id           VARCHAR2(32) NOT NULL REFERENCES lottery_tickets(ticket_id),
    amount              NUMBER(10,2) NOT NULL,
    status              VARCHAR2(20) NOT NULL,
    checkout_url        VARCHAR2(1000),
    created_at          TIMESTAMP DEFAULT SYSTIMESTAMP NOT NULL,
    updated_at          TIMESTAMP DEFAULT SYSTIMESTAMP NOT NULL
)
"""

ALL_TABLE_DDLS = [
    ("lottery_tickets", MIGRATION_001_TICKETS),
    ("payments", MIGRATION_001_PAYMENTS),
]

MIGRATION_002_INDEXES = [
    "CREATE INDEX idx_tickets_email ON lottery_tickets(customer_email, created_at)",
    "CREATE INDEX idx_tickets_payment ON lottery_tickets(payment_reference)",
    "CREATE INDEX idx_tickets_status ON lottery_tickets(status)",
    "CREATE INDEX idx_payments_ticket ON payments(ticket_id)",
]

# Children first
DROP_ORDER = ["payments", "lottery_tickets"]

# ORA-00955: name already used; ORA-01408: column list already indexed
_INDEX_EXISTS_CODES = (955, 1408)


def table_exists(conn: oracledb.Connection, table_name: str) -> bool:
    """Check if a table exists in the current schema."""
    with conn.cursor() as cur:
        cur.execute(
            "SELECT COUNT(*) FROM user_tables WHERE table_name = :name",
            {"name": table_name.upper()},
        )
        row = cur.fetchone()
        return bool(row and row[0] > 0)


def run_migrations(conn: oracledb.Connection) -> list[str]:
    """Run all pending migrations. Returns list of actions taken."""
    actions: list[str] = []

    for table_name, ddl in ALL_TABLE_DDLS:
        if not table_exists(conn, table_name):
            with conn.cursor() as cur:
                cur.execute(ddl)
            actions.append(f"Created table: {table_name}")
            logger.info("Created table: %s", table_name)

    for idx_sql in MIGRATION_002_INDEXES:
        idx_name = idx_sql.split("INDEX ")[1].split(" ON")[0]
        try:
            with conn.cursor() as cur:
                cur.execute(idx_sql)
        except oracledb.DatabaseError as e:
            error_obj = e.args[0]
            if getattr(error_obj, "code", None) in _INDEX_EXISTS_CODES:
                continue
            raise
        actions.append(f"Created index: {idx_name}")

    conn.commit()
    return actions


def drop_all_tables(conn: oracledb.Connection) -> list[str]:
    """Drop all tables (for reset). Returns list of actions taken."""
    actions: list[str] = []
    for table_name in DROP_ORDER:
        if table_exists(conn, table_name):
            with conn.cursor() as cur:
                cur.execute(f"DROP TABLE {table_name} CASCADE CONSTRAINTS PURGE")
            actions.append(f"Dropped table: {table_name}")
            logger.info("Dropped table: %s", table_name)
    conn.commit()
    return actions
