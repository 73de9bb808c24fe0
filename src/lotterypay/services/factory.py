"""Builds the ticket service graph from settings and an open database handle."""

from __future__ import annotations

from typing import Any

from lotterypay.core.config import Settings
from lotterypay.repositories.payment_repository import PaymentRepository
from lotterypay.repositories.ticket_repository import TicketRepository
from lotterypay.services.email import EmailService, SMTPConfig
from lotterypay.services.gateways.mollie import MollieGateway
from lotterypay.services.numbers import NumberSampler
from lotterypay.services.tickets import TicketService


def build_sampler(settings: Settings) -> NumberSampler:
    """Raises ``SamplerConfigError`` on an impossible range."""
    return NumberSampler(
        min_number=settings.lottery_min_number,
        max_number=settings.lottery_max_number,
        numbers_per_set=settings.lottery_numbers_per_set,
    )


def build_email_service(settings: Settings) -> EmailService:
    smtp = None
    if settings.smtp_host:
        smtp = SMTPConfig(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_pass,
            secure=settings.smtp_secure,
        )
    return EmailService(
        smtp=smtp,
        from_email=settings.from_email,
        from_name=settings.from_name,
        dev_mode=settings.is_development,
    )


def build_ticket_service(
    settings: Settings,
    database: Any,
    *,
    email_service: EmailService | None = None,
) -> TicketService:
    gateway = MollieGateway(
        api_key=settings.mollie_api_key,
        redirect_url=settings.redirect_url,
        webhook_url=settings.webhook_url or None,
        currency=settings.payment_currency,
        api_base=settings.mollie_api_base,
        timeout=settings.gateway_timeout_seconds,
    )
    return TicketService(
        ticket_repo=TicketRepository(pool=database),
        payment_repo=PaymentRepository(pool=database),
        gateway=gateway,
        notifier=email_service or build_email_service(settings),
        sampler=build_sampler(settings),
        brand=settings.from_name,
    )
