"""Synthetic data factories for testing: realistic fake tickets and payments."""

from __future__ import annotations

import random
import uuid
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any

from faker import Faker

from lotterypay.core.constants import (
    AMOUNT_QUANTUM,
    GATEWAY_STATUSES,
    STATUS_PENDING,
)
from lotterypay.services.numbers import NumberSampler

fake = Faker("nl_NL")
Faker.seed(42)
random.seed(42)

_sampler = NumberSampler()


def _uuid() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(UTC)


def _reference() -> str:
    return "tr_" + fake.pystr(min_chars=10, max_chars=10)


# ── Ticket Factory ──────────────────────────────────────────────────

def build_ticket(**overrides: Any) -> dict[str, Any]:
    """Generate a synthetic ticket row (numbers already decoded)."""
    unit_count = overrides.pop("unit_count", random.randint(1, 5))
    unit_price = Decimal(random.choice(["2.50", "5.00", "10.00"]))
    data: dict[str, Any] = {
        "ticket_id": _uuid(),
        "customer_email": fake.unique.email(),
        "customer_name": fake.name(),
        "numbers": _sampler.draw(unit_count),
        "unit_count": unit_count,
        "amount": (unit_price * unit_count).quantize(AMOUNT_QUANTUM),
        "payment_reference": _reference(),
        "status": STATUS_PENDING,
        "created_at": _now() - timedelta(minutes=random.randint(1, 600)),
        "paid_at": None,
    }
    data.update(overrides)
    return data


def build_ticket_batch(count: int = 5, **overrides: Any) -> list[dict[str, Any]]:
    """Generate multiple synthetic tickets."""
    return [build_ticket(**overrides) for _ in range(count)]


# ── Payment Factory ─────────────────────────────────────────────────

def build_payment(ticket: dict[str, Any] | None = None, **overrides: Any) -> dict[str, Any]:
    """Generate a payment row, linked to *ticket* when given."""
    ticket = ticket or build_ticket()
    reference = ticket.get("payment_reference") or _reference()
    data: dict[str, Any] = {
        "payment_id": _uuid(),
        "external_reference": reference,
        "ticket_id": ticket["ticket_id"],
        "amount": ticket["amount"],
        "status": random.choice(sorted(GATEWAY_STATUSES)),
        "checkout_url": f"https://www.mollie.com/checkout/select-method/{reference}",
        "created_at": ticket["created_at"],
        "updated_at": _now(),
    }
    data.update(overrides)
    return data
