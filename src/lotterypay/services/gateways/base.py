"""Abstract payment gateway interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Charge:
    """A charge opened at the gateway."""

    external_reference: str
    checkout_url: str | None
    status: str


class GatewayError(Exception):
    """Error talking to, or returned by, the payment gateway."""

    def __init__(self, gateway: str, detail: str, status_code: int | None = None) -> None:
        self.gateway = gateway
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"[{gateway}] {detail}")


class PaymentGateway(ABC):
    """Hosted-checkout payment gateway.

    The ticket service treats the gateway as the only source of truth for
    payment status.
    """

    gateway_name: str = ""

    @abstractmethod
    def open_charge(
        self,
        ticket_id: str,
        amount: Decimal,
        description: str,
        customer_email: str,
    ) -> Charge:
        """Create a payment and return its reference and checkout URL."""

    @abstractmethod
    def get_status(self, external_reference: str) -> str:
        """Return the gateway's current status for a payment."""
