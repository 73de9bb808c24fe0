"""Ticket request schemas."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field


class TicketCreate(BaseModel):
    """Body of ``POST /ticket``. Range checks live in the ticket service."""

    customer_email: EmailStr
    customer_name: str = Field(min_length=1, max_length=255)
    unit_count: int
    unit_price: Decimal
