"""
db/models/budget.py

Persisted repair-shop budget (quote) rows.
"""

from __future__ import annotations

import uuid

from sqlalchemy import BigInteger, Boolean, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class Budget(Base, TimestampMixin):
    __tablename__ = "budgets"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    owner_id: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        comment="Shop/user that owns the budget",
    )
    device_type: Mapped[str] = mapped_column(String(120), nullable=False)
    service_description: Mapped[str] = mapped_column(String(500), nullable=False)
    quality: Mapped[str | None] = mapped_column(String(120), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    cash_price: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Minor units (centavos)",
    )
    installment_price: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Minor units (centavos)",
    )
    installment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    payment_method: Mapped[str] = mapped_column(String(120), nullable=False)
    warranty_months: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    validity_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    includes_delivery: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    includes_screen_protector: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    __table_args__ = (
        CheckConstraint("installment_price >= cash_price", name="installment_gte_cash"),
        CheckConstraint("installment_count >= 1", name="installment_count_positive"),
        Index("ix_budgets_owner_id", "owner_id"),
        Index("ix_budgets_device_type", "device_type"),
    )
