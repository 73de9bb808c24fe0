"""Domain constants for lotterypay."""

from __future__ import annotations

from decimal import Decimal

# ── Ticket Purchase Limits ──────────────────────────────────────────
MIN_UNIT_COUNT = 1
MAX_UNIT_COUNT = 100
MIN_UNIT_PRICE = Decimal("0.01")
AMOUNT_QUANTUM = Decimal("0.01")

# ── Ticket Statuses ─────────────────────────────────────────────────
STATUS_PENDING = "pending"
STATUS_PAID = "paid"
STATUS_FAILED = "failed"
STATUS_CANCELLED = "cancelled"  # only set by manual intervention

TICKET_STATUSES: list[str] = [STATUS_PENDING, STATUS_PAID, STATUS_FAILED, STATUS_CANCELLED]

# ── Gateway Payment Statuses ────────────────────────────────────────
GATEWAY_STATUS_PAID = "paid"
# Mollie spells it "canceled"; accept both
GATEWAY_FAILURE_STATUSES: set[str] = {"failed", "canceled", "cancelled", "expired"}
GATEWAY_STATUSES: set[str] = {
    "open",
    "pending",
    "authorized",
    GATEWAY_STATUS_PAID,
    *GATEWAY_FAILURE_STATUSES,
}

# ── Lottery Number Defaults ─────────────────────────────────────────
DEFAULT_MIN_NUMBER = 1
DEFAULT_MAX_NUMBER = 45
DEFAULT_NUMBERS_PER_SET = 6
