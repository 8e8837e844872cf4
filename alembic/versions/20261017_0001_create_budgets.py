"""create budgets table

Revision ID: 20261017_0001
Revises:
Create Date: 2026-10-17 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261017_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "budgets",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("owner_id", sa.String(length=64), nullable=True, comment="Shop/user that owns the budget"),
        sa.Column("device_type", sa.String(length=120), nullable=False),
        sa.Column("service_description", sa.String(length=500), nullable=False),
        sa.Column("quality", sa.String(length=120), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("cash_price", sa.BigInteger(), nullable=False, comment="Minor units (centavos)"),
        sa.Column("installment_price", sa.BigInteger(), nullable=False, comment="Minor units (centavos)"),
        sa.Column("installment_count", sa.Integer(), nullable=False),
        sa.Column("payment_method", sa.String(length=120), nullable=False),
        sa.Column("warranty_months", sa.Integer(), nullable=False),
        sa.Column("validity_days", sa.Integer(), nullable=False),
        sa.Column("includes_delivery", sa.Boolean(), nullable=False),
        sa.Column("includes_screen_protector", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("installment_price >= cash_price", name="ck_budgets_installment_gte_cash"),
        sa.CheckConstraint("installment_count >= 1", name="ck_budgets_installment_count_positive"),
        sa.PrimaryKeyConstraint("id", name="pk_budgets"),
    )
    op.create_index("ix_budgets_owner_id", "budgets", ["owner_id"], unique=False)
    op.create_index("ix_budgets_device_type", "budgets", ["device_type"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_budgets_device_type", table_name="budgets")
    op.drop_index("ix_budgets_owner_id", table_name="budgets")
    op.drop_table("budgets")
