"""baseline pipeline schema: stages, leads, orders, affiliates

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "stage_registries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "stages",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("registry_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(length=20), nullable=False),
        sa.Column("icon", sa.String(length=50), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("first_referenced_at", sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["registry_id"], ["stage_registries.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_stages_registry_id", "stages", ["registry_id"])
    op.create_index("idx_stages_registry_position", "stages", ["registry_id", "position"])
    op.create_index("idx_stages_registry_slug", "stages", ["registry_id", "slug"])

    op.create_table(
        "affiliates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("affiliate_code", sa.String(length=40), nullable=False),
        sa.Column("commission_rate", sa.Numeric(5, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("affiliate_code"),
    )

    op.create_table(
        "leads",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("registry_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("stage_id", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=40), nullable=False),
        sa.Column("estimated_value", sa.Numeric(12, 2), nullable=True),
        sa.Column("assigned_affiliate_id", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["registry_id"], ["stage_registries.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["stage_id"], ["stages.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["assigned_affiliate_id"], ["affiliates.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_leads_registry_id", "leads", ["registry_id"])
    op.create_index("idx_leads_registry_stage", "leads", ["registry_id", "stage_id"])
    op.create_index("idx_leads_status", "leads", ["status"])

    op.create_table(
        "lead_stage_history",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("lead_id", sa.Integer(), nullable=False),
        sa.Column("previous_stage_id", sa.Integer(), nullable=True),
        sa.Column("new_stage_id", sa.Integer(), nullable=True),
        sa.Column("previous_status", sa.String(length=40), nullable=True),
        sa.Column("new_status", sa.String(length=40), nullable=True),
        sa.Column("actor", sa.String(length=100), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["lead_id"], ["leads.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["previous_stage_id"], ["stages.id"]),
        sa.ForeignKeyConstraint(["new_stage_id"], ["stages.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_lead_stage_history_lead", "lead_stage_history", ["lead_id"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("affiliate_id", sa.Integer(), nullable=True),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(length=40), nullable=False),
        sa.Column("tracking_number", sa.String(length=255), nullable=True),
        sa.Column("regulatory_tracking_code", sa.String(length=255), nullable=True),
        sa.Column("import_tracking_code", sa.String(length=255), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["affiliate_id"], ["affiliates.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_orders_status", "orders", ["status"])
    op.create_index("idx_orders_patient", "orders", ["patient_id"])

    op.create_table(
        "order_status_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("order_id", sa.Integer(), nullable=False),
        sa.Column("previous_status", sa.String(length=40), nullable=False),
        sa.Column("new_status", sa.String(length=40), nullable=False),
        sa.Column("actor", sa.String(length=100), nullable=True),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("dispatched_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_order_status_events_order", "order_status_events", ["order_id"])
    op.create_index("idx_order_status_events_dispatched", "order_status_events", ["dispatched_at"])

    op.create_table(
        "affiliate_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("affiliate_id", sa.Integer(), nullable=False),
        sa.Column("event_type", sa.String(length=20), nullable=False),
        sa.Column("client_ref", sa.String(length=100), nullable=True),
        sa.Column("order_id", sa.Integer(), nullable=True),
        sa.Column("order_value", sa.Numeric(12, 2), nullable=True),
        sa.Column("referrer", sa.String(length=500), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["affiliate_id"], ["affiliates.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_affiliate_events_affiliate_type_created",
        "affiliate_events",
        ["affiliate_id", "event_type", "created_at"],
    )

    op.create_table(
        "prescriptions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("valid_until", sa.Date(), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_prescriptions_patient", "prescriptions", ["patient_id"])

    op.create_table(
        "regulatory_approvals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("protocol_number", sa.String(length=100), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("protocol_number"),
    )
    op.create_index("idx_regulatory_approvals_patient", "regulatory_approvals", ["patient_id"])


def downgrade() -> None:
    op.drop_index("idx_regulatory_approvals_patient", table_name="regulatory_approvals")
    op.drop_table("regulatory_approvals")
    op.drop_index("idx_prescriptions_patient", table_name="prescriptions")
    op.drop_table("prescriptions")
    op.drop_index("idx_affiliate_events_affiliate_type_created", table_name="affiliate_events")
    op.drop_table("affiliate_events")
    op.drop_index("idx_order_status_events_dispatched", table_name="order_status_events")
    op.drop_index("idx_order_status_events_order", table_name="order_status_events")
    op.drop_table("order_status_events")
    op.drop_index("idx_orders_patient", table_name="orders")
    op.drop_index("idx_orders_status", table_name="orders")
    op.drop_table("orders")
    op.drop_index("idx_lead_stage_history_lead", table_name="lead_stage_history")
    op.drop_table("lead_stage_history")
    op.drop_index("idx_leads_status", table_name="leads")
    op.drop_index("idx_leads_registry_stage", table_name="leads")
    op.drop_index("ix_leads_registry_id", table_name="leads")
    op.drop_table("leads")
    op.drop_table("affiliates")
    op.drop_index("idx_stages_registry_slug", table_name="stages")
    op.drop_index("idx_stages_registry_position", table_name="stages")
    op.drop_index("ix_stages_registry_id", table_name="stages")
    op.drop_table("stages")
    op.drop_table("stage_registries")
