"""Shared pytest fixtures and test configuration."""

from __future__ import annotations

import os
import sys
from datetime import datetime
from decimal import Decimal
from typing import Any

import pytest
from fastapi.testclient import TestClient

# Must be set before lotterypay.main builds its module-level app
os.environ.setdefault("APP_ENV", "testing")

# Ensure src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from lotterypay.core.constants import STATUS_PAID, STATUS_PENDING  # noqa: E402
from lotterypay.services.gateways.base import Charge, GatewayError, PaymentGateway  # noqa: E402
from lotterypay.services.numbers import NumberSampler  # noqa: E402
from lotterypay.services.tickets import TicketService  # noqa: E402


class MockCursor:
    """Mock Oracle cursor supporting context manager and common operations."""

    def __init__(self) -> None:
        self.description: list[tuple[str, ...]] | None = None
        self._rows: list[tuple[Any, ...]] = []
        self._execute_log: list[tuple[str, dict[str, Any] | None]] = []
        self.rowcount: int = 0

    def execute(self, sql: str, params: dict[str, Any] | None = None) -> None:
        self._execute_log.append((sql, params))

    def fetchall(self) -> list[tuple[Any, ...]]:
        return self._rows

    def fetchone(self) -> tuple[Any, ...] | None:
        return self._rows[0] if self._rows else None

    @property
    def last_sql(self) -> str:
        return self._execute_log[-1][0]

    @property
    def last_params(self) -> dict[str, Any]:
        return self._execute_log[-1][1] or {}

    def __enter__(self) -> MockCursor:
        return self

    def __exit__(self, *args: Any) -> None:
        pass


class MockConnection:
    """Mock Oracle connection supporting context manager."""

    def __init__(self) -> None:
        self._cursor = MockCursor()
        self._committed = False
        self._closed = False

    def cursor(self) -> MockCursor:
        return self._cursor

    def commit(self) -> None:
        self._committed = True

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> MockConnection:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class MockPool:
    """Mock Oracle connection pool."""

    def __init__(self) -> None:
        self._connection = MockConnection()

    def acquire(self) -> MockConnection:
        return self._connection

    def close(self, force: bool = False) -> None:
        pass


@pytest.fixture
def mock_pool() -> MockPool:
    """Provide a mock Oracle connection pool."""
    return MockPool()


@pytest.fixture
def mock_connection(mock_pool: MockPool) -> MockConnection:
    """Provide a mock Oracle connection."""
    return mock_pool._connection


@pytest.fixture
def mock_cursor(mock_connection: MockConnection) -> MockCursor:
    """Provide a mock Oracle cursor."""
    return mock_connection._cursor


# ── Helper for setting up mock query results ─────────────────────────

def set_mock_query_result(
    cursor: MockCursor,
    columns: list[str],
    rows: list[tuple[Any, ...]],
) -> None:
    """Configure mock cursor to return specific query results."""
    cursor.description = [(col.upper(),) for col in columns]
    cursor._rows = rows
    cursor.rowcount = len(rows)


# ── In-memory collaborators for service and route tests ─────────────


class InMemoryTicketRepo:
    def __init__(self) -> None:
        self._store: dict[str, dict[str, Any]] = {}
        self._seq = 0

    def create(self, data: dict[str, Any], new_id: str | None = None) -> str:
        if new_id is None:
            self._seq += 1
            new_id = f"ticket{self._seq:04d}"
        self._store[new_id] = {
            "ticket_id": new_id,
            "payment_reference": None,
            "paid_at": None,
            **data,
        }
        return new_id

    def find_by_id(self, ticket_id: str) -> dict[str, Any] | None:
        row = self._store.get(ticket_id)
        return dict(row) if row is not None else None

    def find_by_email(self, email: str) -> list[dict[str, Any]]:
        rows = [dict(t) for t in self._store.values() if t["customer_email"] == email]
        return sorted(rows, key=lambda t: t["created_at"], reverse=True)

    def find_pending_with_reference(self) -> list[dict[str, Any]]:
        rows = [
            dict(t)
            for t in self._store.values()
            if t["status"] == STATUS_PENDING and t.get("payment_reference")
        ]
        return sorted(rows, key=lambda t: t["created_at"])

    def set_payment_reference(self, ticket_id: str, reference: str) -> int:
        row = self._store.get(ticket_id)
        if row is None or row.get("payment_reference"):
            return 0
        row["payment_reference"] = reference
        return 1

    def transition_status(
        self, ticket_id: str, to_status: str, paid_at: datetime | None = None
    ) -> int:
        row = self._store.get(ticket_id)
        if row is None or row["status"] != STATUS_PENDING:
            return 0
        row["status"] = to_status
        if to_status == STATUS_PAID:
            row["paid_at"] = paid_at
        return 1


class InMemoryPaymentRepo:
    def __init__(self) -> None:
        self._store: dict[str, dict[str, Any]] = {}

    def create(self, data: dict[str, Any], new_id: str | None = None) -> str:
        new_id = new_id or f"pay{len(self._store) + 1:04d}"
        self._store[new_id] = {"payment_id": new_id, **data}
        return new_id

    def find_by_external_reference(self, reference: str) -> dict[str, Any] | None:
        for row in self._store.values():
            if row["external_reference"] == reference:
                return dict(row)
        return None

    def update_status(self, reference: str, status: str, updated_at: datetime) -> int:
        for row in self._store.values():
            if row["external_reference"] == reference:
                row["status"] = status
                row["updated_at"] = updated_at
                return 1
        return 0


class FakeGateway(PaymentGateway):
    """Scriptable gateway: set ``statuses[ref]`` to what a status check returns."""

    gateway_name = "fake"

    def __init__(self) -> None:
        self.statuses: dict[str, str] = {}
        self.opened: list[dict[str, Any]] = []
        self.status_checks: list[str] = []
        self.fail_open = False
        self.fail_status = False

    def open_charge(
        self,
        ticket_id: str,
        amount: Decimal,
        description: str,
        customer_email: str,
    ) -> Charge:
        if self.fail_open:
            raise GatewayError(self.gateway_name, "connection refused")
        reference = f"tr_{len(self.opened) + 1}"
        self.opened.append(
            {
                "ticket_id": ticket_id,
                "amount": amount,
                "description": description,
                "customer_email": customer_email,
            }
        )
        self.statuses[reference] = "open"
        return Charge(
            external_reference=reference,
            checkout_url=f"https://checkout.example/{reference}",
            status="open",
        )

    def get_status(self, external_reference: str) -> str:
        self.status_checks.append(external_reference)
        if self.fail_status:
            raise GatewayError(self.gateway_name, "timeout", status_code=504)
        return self.statuses[external_reference]


class RecordingNotifier:
    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.sent: list[dict[str, Any]] = []

    def send_ticket_confirmation(self, ticket: dict[str, Any]) -> bool:
        self.sent.append(ticket)
        return self.result


@pytest.fixture
def ticket_repo() -> InMemoryTicketRepo:
    return InMemoryTicketRepo()


@pytest.fixture
def payment_repo() -> InMemoryPaymentRepo:
    return InMemoryPaymentRepo()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def ticket_service(
    ticket_repo: InMemoryTicketRepo,
    payment_repo: InMemoryPaymentRepo,
    gateway: FakeGateway,
    notifier: RecordingNotifier,
) -> TicketService:
    return TicketService(
        ticket_repo=ticket_repo,
        payment_repo=payment_repo,
        gateway=gateway,
        notifier=notifier,
        sampler=NumberSampler(min_number=1, max_number=45, numbers_per_set=6),
    )


@pytest.fixture
def webhook_worker(ticket_service: TicketService):  # type: ignore[no-untyped-def]
    """A worker that is never started; tests drain it with ``run_pending``."""
    from lotterypay.workers.webhook_worker import WebhookWorker

    return WebhookWorker(ticket_service)


@pytest.fixture
def app(ticket_service: TicketService, webhook_worker):  # type: ignore[no-untyped-def]
    """Create a FastAPI test app wired to the in-memory service."""
    from lotterypay.api.deps import get_ticket_service, get_webhook_worker
    from lotterypay.core.config import Settings
    from lotterypay.main import create_app

    settings = Settings(app_env="testing")
    application = create_app(settings=settings)
    application.dependency_overrides[get_ticket_service] = lambda: ticket_service
    application.dependency_overrides[get_webhook_worker] = lambda: webhook_worker
    return application


@pytest.fixture
def client(app):  # type: ignore[no-untyped-def]
    """Create a test client."""
    return TestClient(app)
