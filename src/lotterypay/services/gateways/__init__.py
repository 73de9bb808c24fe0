"""Payment gateway adapters."""

from lotterypay.services.gateways.base import Charge, GatewayError, PaymentGateway
from lotterypay.services.gateways.mollie import MollieGateway

__all__ = ["Charge", "GatewayError", "MollieGateway", "PaymentGateway"]
