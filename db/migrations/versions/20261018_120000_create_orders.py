"""Create orders table for the Order Entry service.

Revision ID: 4c2e9a7f1b3d
Revises: None
Create Date: 2026-10-18 12:00:00 UTC

Migration naming convention:
- Filename: YYYYMMDD_HHMMSS_slug.py (chronological sorting)
- Revision ID: Random hash (collision-proof for parallel branches)
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "4c2e9a7f1b3d"
down_revision = None
branch_labels = None
depends_on = None

ORDER_STATUSES = ("Submitted", "Cancelled", "Executed", "Completed", "Failed")


def upgrade() -> None:
    op.create_table(
        "orders",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("fund_name", sa.String(length=32), nullable=False),
        sa.Column("transaction_type", sa.String(length=4), nullable=False),
        sa.Column("quantity", sa.Numeric(precision=20, scale=6), nullable=False),
        sa.Column("order_value", sa.Numeric(precision=24, scale=6), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="Submitted"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("quantity > 0", name="ck_orders_quantity_positive"),
        sa.CheckConstraint(
            "transaction_type IN ('Buy', 'Sell')", name="ck_orders_transaction_type"
        ),
        sa.CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in ORDER_STATUSES) + ")",
            name="ck_orders_status",
        ),
    )
    op.create_index("ix_orders_created_at", "orders", [sa.text("created_at DESC")])
    op.create_index("ix_orders_status", "orders", ["status"])


def downgrade() -> None:
    op.drop_index("ix_orders_status", table_name="orders")
    op.drop_index("ix_orders_created_at", table_name="orders")
    op.drop_table("orders")
