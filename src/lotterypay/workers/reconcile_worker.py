"""Reconcile worker: one pass over pending tickets with an open charge.

Re-runs the gateway status check for each, catching tickets whose webhook
never arrived. Run it on demand (``python -m lotterypay.workers.run
reconcile``); it does not schedule itself.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class ReconcileWorkerResult:
    def __init__(self) -> None:
        self.checked: list[str] = []
        self.resolved: dict[str, str] = {}
        self.errors: list[str] = []

    @property
    def success(self) -> bool:
        return len(self.errors) == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "checked": self.checked,
            "resolved": self.resolved,
            "errors": self.errors,
            "success": self.success,
        }


class ReconcileWorker:
    def __init__(self, ticket_service: Any, ticket_repo: Any) -> None:
        self.ticket_service = ticket_service
        self.ticket_repo = ticket_repo

    def run(self) -> ReconcileWorkerResult:
        result = ReconcileWorkerResult()
        try:
            tickets = self.ticket_repo.find_pending_with_reference()
        except Exception as e:
            result.errors.append(f"Failed to fetch pending tickets: {e}")
            return result

        for ticket in tickets:
            ticket_id = ticket.get("ticket_id", "")
            if not ticket_id:
                continue
            try:
                refreshed = self.ticket_service.query_status(ticket_id)
            except Exception as e:
                result.errors.append(f"Failed to check ticket {ticket_id}: {e}")
                continue
            result.checked.append(ticket_id)
            status = refreshed.get("status")
            if status and status != ticket.get("status"):
                result.resolved[ticket_id] = status
                logger.info("Reconciled ticket %s -> %s", ticket_id, status)
        return result
