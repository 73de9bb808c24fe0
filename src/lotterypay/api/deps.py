"""Dependency injection for FastAPI routes.

Services are built once in the app lifespan and kept on ``app.state``;
tests swap them with ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request


def _from_state(request: Request, name: str) -> Any:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return value


def get_ticket_service(request: Request) -> Any:
    """The ``TicketService`` for this app."""
    return _from_state(request, "ticket_service")


def get_webhook_worker(request: Request) -> Any:
    """The ``WebhookWorker`` that processes payment callbacks."""
    return _from_state(request, "webhook_worker")
