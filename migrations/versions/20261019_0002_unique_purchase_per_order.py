"""one purchase event per order

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:00:02
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


PURCHASE_ORDER_UNIQUE = "uq_affiliate_events_purchase_order"


revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    purchase_only = sa.text("event_type = 'purchase'")
    op.create_index(
        PURCHASE_ORDER_UNIQUE,
        "affiliate_events",
        ["order_id"],
        unique=True,
        sqlite_where=purchase_only,
        postgresql_where=purchase_only,
    )


def downgrade() -> None:
    op.drop_index(PURCHASE_ORDER_UNIQUE, table_name="affiliate_events")
