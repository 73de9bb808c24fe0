"""Lottery ticket routes: /api/lottery."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from lotterypay.api.deps import get_ticket_service
from lotterypay.api.schemas.tickets import TicketCreate
from lotterypay.services.tickets import TicketError

router = APIRouter(prefix="/api/lottery", tags=["tickets"])


@router.post("/ticket", status_code=201)
def create_ticket(
    body: TicketCreate,
    service: Any = Depends(get_ticket_service),
) -> dict[str, Any]:
    """Create a ticket and open a payment; redirect the customer to ``checkout_url``."""
    try:
        return service.create_ticket(
            customer_email=str(body.customer_email),
            customer_name=body.customer_name,
            unit_count=body.unit_count,
            unit_price=body.unit_price,
        )
    except TicketError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e


@router.get("/ticket/{ticket_id}")
def get_ticket(ticket_id: str, service: Any = Depends(get_ticket_service)) -> dict[str, Any]:
    try:
        return service.get_ticket(ticket_id)
    except TicketError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e


@router.get("/ticket/{ticket_id}/status")
def get_ticket_status(
    ticket_id: str,
    service: Any = Depends(get_ticket_service),
) -> dict[str, Any]:
    """Re-check the payment with the gateway and return the ticket status."""
    try:
        ticket = service.query_status(ticket_id)
    except TicketError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e
    return {
        "ticket_id": ticket["ticket_id"],
        "status": ticket["status"],
        "paid_at": ticket.get("paid_at"),
    }


@router.get("/tickets/email/{email}")
def list_tickets_by_email(
    email: str,
    service: Any = Depends(get_ticket_service),
) -> dict[str, Any]:
    """All tickets bought with this email address, newest first."""
    return service.list_tickets_by_email(email)
