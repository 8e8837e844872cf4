"""
app/repositories/budget_repository.py

Persistence layer for validated budget records.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from app.domain.budget import BudgetRecord
from db.models.budget import Budget

_DEFAULT_BATCH_SIZE = 1000


class BudgetRepository:
    """
    Repository for bulk persistence and lookup of budgets.

    Does not commit; the calling service owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def insert_many(
        self,
        records: Sequence[BudgetRecord],
        *,
        owner_id: str | None = None,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> int:
        """
        Insert records with chunked PostgreSQL bulk INSERT and return the count.
        """

        if not records:
            return 0

        payloads = [self._to_payload(record, owner_id=owner_id) for record in records]
        size = max(1, batch_size)
        inserted = 0

        for start in range(0, len(payloads), size):
            chunk = payloads[start : start + size]
            stmt = insert(Budget).values(chunk).returning(Budget.id)
            inserted += len(self._session.scalars(stmt).all())

        return inserted

    def list_for_owner(self, owner_id: str | None = None) -> list[Budget]:
        """
        Return budgets oldest first, optionally scoped to one owner.
        """

        stmt = select(Budget).order_by(Budget.created_at.asc(), Budget.id.asc())
        if owner_id is not None:
            stmt = stmt.where(Budget.owner_id == owner_id)
        return list(self._session.scalars(stmt).all())

    @staticmethod
    def _to_payload(record: BudgetRecord, *, owner_id: str | None) -> dict[str, Any]:
        return {
            "owner_id": owner_id,
            "device_type": record.device_type,
            "service_description": record.service_description,
            "quality": record.quality,
            "notes": record.notes,
            "cash_price": record.cash_price,
            "installment_price": record.installment_price,
            "installment_count": record.installment_count,
            "payment_method": record.payment_method,
            "warranty_months": record.warranty_months,
            "validity_days": record.validity_days,
            "includes_delivery": record.includes_delivery,
            "includes_screen_protector": record.includes_screen_protector,
        }
