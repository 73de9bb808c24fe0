"""Payment repository: data access for the ``payments`` table."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from lotterypay.repositories.base import BaseRepository


class PaymentRepository(BaseRepository):
    def __init__(self, pool: Any) -> None:
        super().__init__(pool=pool, table_name="payments", id_column="payment_id")

    def find_by_external_reference(self, reference: str) -> dict[str, Any] | None:
        rows = self.find_by_field("external_reference", reference)
        return rows[0] if rows else None

    def update_status(self, reference: str, status: str, updated_at: datetime) -> int:
        sql = (
            f"UPDATE {self.table_name} SET status = :status, updated_at = :updated_at "
            "WHERE external_reference = :ref"
        )
        return self._execute(sql, {"status": status, "updated_at": updated_at, "ref": reference})
