"""Mollie payments client.

Talks to the Mollie v2 REST API with an API key (``test_…`` or ``live_…``).
Only the two calls the ticket lifecycle needs are implemented: create a
payment and fetch a payment.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

import requests

from lotterypay.core.constants import AMOUNT_QUANTUM
from lotterypay.services.gateways.base import Charge, GatewayError, PaymentGateway

logger = logging.getLogger(__name__)

MOLLIE_API_BASE = "https://api.mollie.com/v2"


def build_redirect_url(template: str, ticket_id: str) -> str:
    """Fill ``{ticket_id}`` into the template, or append ``?ticket=<id>``."""
    if "{ticket_id}" in template:
        return template.replace("{ticket_id}", ticket_id)
    separator = "&" if "?" in template else "?"
    return f"{template}{separator}ticket={ticket_id}"


class MollieGateway(PaymentGateway):
    gateway_name = "mollie"

    def __init__(
        self,
        api_key: str,
        redirect_url: str,
        webhook_url: str | None = None,
        *,
        currency: str = "EUR",
        api_base: str = MOLLIE_API_BASE,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self.redirect_url = redirect_url
        self.webhook_url = webhook_url or ""
        self.currency = currency
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            }
        )

    def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self.api_base}{path}"
        try:
            r = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise GatewayError(self.gateway_name, f"{method} {path} failed: {exc}") from exc

        try:
            data = r.json() if r.content else {}
        except ValueError:
            data = {"raw": r.text}

        if r.status_code >= 400:
            detail = data.get("detail") or data.get("title") or r.text
            raise GatewayError(
                self.gateway_name,
                f"{method} {path} returned {r.status_code}: {detail}",
                status_code=r.status_code,
            )
        return data

    def open_charge(
        self,
        ticket_id: str,
        amount: Decimal,
        description: str,
        customer_email: str,
    ) -> Charge:
        payload: dict[str, Any] = {
            "amount": {
                "currency": self.currency,
                "value": str(Decimal(amount).quantize(AMOUNT_QUANTUM)),
            },
            "description": description,
            "redirectUrl": build_redirect_url(self.redirect_url, ticket_id),
            "metadata": {"ticket_id": ticket_id, "customer_email": customer_email},
        }
        if self.webhook_url:
            payload["webhookUrl"] = self.webhook_url

        data = self._request("POST", "/payments", payload)
        reference = data.get("id")
        if not reference:
            raise GatewayError(self.gateway_name, "Payment created without an id")

        checkout = ((data.get("_links") or {}).get("checkout") or {}).get("href")
        logger.info("Opened Mollie payment %s for ticket %s", reference, ticket_id)
        return Charge(
            external_reference=reference,
            checkout_url=checkout,
            status=data.get("status", "open"),
        )

    def get_status(self, external_reference: str) -> str:
        data = self._request("GET", f"/payments/{external_reference}")
        status = data.get("status")
        if not status:
            raise GatewayError(self.gateway_name, f"No status for payment {external_reference}")
        return str(status)
