"""Ticket repository: data access for the ``lottery_tickets`` table."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from lotterypay.core.constants import STATUS_PAID, STATUS_PENDING
from lotterypay.repositories.base import BaseRepository


class TicketRepository(BaseRepository):
    """CRUD + lifecycle queries for tickets.

    ``numbers`` is stored as JSON text and handed back decoded.
    """

    def __init__(self, pool: Any) -> None:
        super().__init__(pool=pool, table_name="lottery_tickets", id_column="ticket_id")

    @staticmethod
    def _decode(row: dict[str, Any]) -> dict[str, Any]:
        numbers = row.get("numbers")
        if isinstance(numbers, str):
            row = {**row, "numbers": json.loads(numbers)}
        return row

    def create(self, data: dict[str, Any], new_id: str | None = None) -> str:
        if "numbers" in data and not isinstance(data["numbers"], str):
            data = {**data, "numbers": json.dumps(data["numbers"])}
        return super().create(data=data, new_id=new_id)

    def find_by_id(self, entity_id: str) -> dict[str, Any] | None:
        row = super().find_by_id(entity_id)
        return self._decode(row) if row is not None else None

    def find_by_email(self, email: str) -> list[dict[str, Any]]:
        """All tickets for an exact email, newest first."""
        rows = self.find_by_field("customer_email", email, order_by="created_at DESC")
        return [self._decode(r) for r in rows]

    def find_pending_with_reference(self) -> list[dict[str, Any]]:
        """Pending tickets whose charge was opened, oldest first."""
        sql = (
            f"SELECT * FROM {self.table_name} "
            "WHERE status = :status AND payment_reference IS NOT NULL "
            "ORDER BY created_at ASC"
        )
        return [self._decode(r) for r in self._fetch(sql, {"status": STATUS_PENDING})]

    def set_payment_reference(self, ticket_id: str, reference: str) -> int:
        """Attach the gateway reference; only succeeds while it is still unset."""
        sql = (
            f"UPDATE {self.table_name} SET payment_reference = :ref "
            "WHERE ticket_id = :id AND payment_reference IS NULL"
        )
        return self._execute(sql, {"ref": reference, "id": ticket_id})

    def transition_status(
        self,
        ticket_id: str,
        to_status: str,
        paid_at: datetime | None = None,
    ) -> int:
        """Compare-and-set ``pending -> to_status``.

        Returns 1 if this call moved the ticket, 0 if it was no longer pending.
        """
        params: dict[str, Any] = {
            "to_status": to_status,
            "id": ticket_id,
            "from_status": STATUS_PENDING,
        }
        set_clause = "status = :to_status"
        if to_status == STATUS_PAID:
            set_clause += ", paid_at = :paid_at"
            params["paid_at"] = paid_at
        sql = (
            f"UPDATE {self.table_name} SET {set_clause} "
            "WHERE ticket_id = :id AND status = :from_status"
        )
        return self._execute(sql, params)
