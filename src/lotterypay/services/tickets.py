"""Ticket service: ticket creation, payment initiation and status lifecycle.

A ticket starts ``pending`` and moves to ``paid`` or ``failed`` only after the
payment gateway reports so. Lottery numbers are drawn once, at creation.

Status changes are compare-and-set on ``pending``, so when two webhook
deliveries race only the one that performs ``pending -> paid`` sends the
confirmation mail.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from lotterypay.core.constants import (
    AMOUNT_QUANTUM,
    GATEWAY_FAILURE_STATUSES,
    GATEWAY_STATUS_PAID,
    MAX_UNIT_COUNT,
    MIN_UNIT_COUNT,
    MIN_UNIT_PRICE,
    STATUS_FAILED,
    STATUS_PAID,
    STATUS_PENDING,
)
from lotterypay.services.gateways.base import GatewayError, PaymentGateway
from lotterypay.services.numbers import NumberSampler

logger = logging.getLogger(__name__)


class TicketError(Exception):
    """Ticket service error with HTTP status hint."""

    def __init__(self, detail: str, status_code: int = 400) -> None:
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


def compute_amount(unit_count: int, unit_price: Decimal) -> Decimal:
    """Total price, exact to the cent."""
    return (Decimal(unit_count) * unit_price).quantize(AMOUNT_QUANTUM)


class TicketService:
    """Orchestrates ticket creation, payment and confirmation."""

    def __init__(
        self,
        ticket_repo: Any,
        payment_repo: Any,
        gateway: PaymentGateway,
        notifier: Any,
        sampler: NumberSampler,
        brand: str = "De Boss Loterij",
    ) -> None:
        self.ticket_repo = ticket_repo
        self.payment_repo = payment_repo
        self.gateway = gateway
        self.notifier = notifier
        self.sampler = sampler
        self.brand = brand

    # ── Create ───────────────────────────────────────────────────────

    def create_ticket(
        self,
        *,
        customer_email: str,
        customer_name: str,
        unit_count: int,
        unit_price: Decimal | str | float,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Create a pending ticket and open a charge for it.

        Validates:
          - customer email and name are present
          - unit_count within 1..100
          - unit_price >= 0.01, in whole cents

        If the gateway call fails the ticket row stays ``pending`` without a
        payment reference.
        """
        if now is None:
            now = datetime.now(tz=UTC)

        customer_email = (customer_email or "").strip()
        customer_name = (customer_name or "").strip()
        if not customer_email or not customer_name:
            raise TicketError("Customer email and name are required")

        if (
            isinstance(unit_count, bool)
            or not isinstance(unit_count, int)
            or not MIN_UNIT_COUNT <= unit_count <= MAX_UNIT_COUNT
        ):
            raise TicketError(
                f"Ticket count must be between {MIN_UNIT_COUNT} and {MAX_UNIT_COUNT}"
            )

        price = self._parse_price(unit_price)
        if price < MIN_UNIT_PRICE:
            raise TicketError(f"Price per ticket must be at least €{MIN_UNIT_PRICE}")
        if price.normalize().as_tuple().exponent < AMOUNT_QUANTUM.as_tuple().exponent:
            raise TicketError("Price per ticket must be a whole number of cents")

        numbers = self.sampler.draw(unit_count)
        amount = compute_amount(unit_count, price)

        ticket_id = self.ticket_repo.create(
            data={
                "customer_email": customer_email,
                "customer_name": customer_name,
                "numbers": numbers,
                "unit_count": unit_count,
                "amount": amount,
                "status": STATUS_PENDING,
                "created_at": now,
            },
        )
        logger.info("Created ticket %s (%d unit(s), %s)", ticket_id, unit_count, amount)

        description = f"{self.brand} - {unit_count} lot(en)"
        try:
            charge = self.gateway.open_charge(ticket_id, amount, description, customer_email)
        except GatewayError as e:
            logger.error("Charge creation failed for ticket %s: %s", ticket_id, e)
            raise TicketError("Failed to create ticket and payment", status_code=500) from e

        self.payment_repo.create(
            data={
                "external_reference": charge.external_reference,
                "ticket_id": ticket_id,
                "amount": amount,
                "status": charge.status,
                "checkout_url": charge.checkout_url,
                "created_at": now,
                "updated_at": now,
            },
        )
        self.ticket_repo.set_payment_reference(ticket_id, charge.external_reference)

        return {
            "ticket_id": ticket_id,
            "checkout_url": charge.checkout_url,
            "amount": amount,
            "numbers": numbers,
        }

    @staticmethod
    def _parse_price(unit_price: Decimal | str | float) -> Decimal:
        try:
            price = Decimal(str(unit_price))
        except (InvalidOperation, ValueError) as e:
            raise TicketError("Price per ticket must be a number") from e
        if not price.is_finite():
            raise TicketError("Price per ticket must be a number")
        return price

    # ── Status lifecycle ─────────────────────────────────────────────

    def handle_callback(self, external_reference: str, now: datetime | None = None) -> str | None:
        """Apply the gateway's authoritative status for a payment.

        Returns the gateway status, or ``None`` if the reference is unknown.
        Raises ``GatewayError`` when the gateway cannot be reached.
        """
        if now is None:
            now = datetime.now(tz=UTC)

        payment = self.payment_repo.find_by_external_reference(external_reference)
        if payment is None:
            logger.warning("Status update for unknown payment %s ignored", external_reference)
            return None

        status = self.gateway.get_status(external_reference)
        self.payment_repo.update_status(external_reference, status, now)

        ticket_id = payment["ticket_id"]
        if status == GATEWAY_STATUS_PAID:
            moved = self.ticket_repo.transition_status(ticket_id, STATUS_PAID, paid_at=now)
            if moved:
                logger.info("Ticket %s paid (payment %s)", ticket_id, external_reference)
                self._notify(ticket_id)
        elif status in GATEWAY_FAILURE_STATUSES:
            moved = self.ticket_repo.transition_status(ticket_id, STATUS_FAILED)
            if moved:
                logger.info(
                    "Ticket %s failed (payment %s %s)", ticket_id, external_reference, status
                )
        else:
            logger.debug("Payment %s still %s", external_reference, status)

        return status

    def _notify(self, ticket_id: str) -> None:
        ticket = self.ticket_repo.find_by_id(ticket_id)
        if ticket is None:
            return
        if not self.notifier.send_ticket_confirmation(ticket):
            logger.warning("Ticket %s is paid but the confirmation email was not sent", ticket_id)

    def query_status(self, ticket_id: str) -> dict[str, Any]:
        """Re-check payment status for a ticket and return the refreshed ticket."""
        ticket = self.ticket_repo.find_by_id(ticket_id)
        if ticket is None or not ticket.get("payment_reference"):
            raise TicketError("Ticket not found or no payment associated", status_code=404)

        try:
            self.handle_callback(ticket["payment_reference"])
        except GatewayError as e:
            logger.error("Status check failed for ticket %s: %s", ticket_id, e)
            raise TicketError("Failed to check payment status", status_code=500) from e

        refreshed: dict[str, Any] = self.ticket_repo.find_by_id(ticket_id) or ticket
        return refreshed

    # ── Reads ────────────────────────────────────────────────────────

    def get_ticket(self, ticket_id: str) -> dict[str, Any]:
        ticket = self.ticket_repo.find_by_id(ticket_id)
        if ticket is None:
            raise TicketError("Ticket not found", status_code=404)
        result: dict[str, Any] = ticket
        return result

    def list_tickets_by_email(self, email: str) -> dict[str, Any]:
        """All tickets for an exact email address, newest first."""
        tickets = self.ticket_repo.find_by_email(email)
        return {"email": email, "count": len(tickets), "tickets": tickets}
