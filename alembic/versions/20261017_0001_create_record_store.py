"""create portal_records and cost_entries tables

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
        "portal_records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("module", sa.String(length=32), nullable=False, comment="training, visit, assessment, story"),
        sa.Column("school_id", sa.String(length=64), nullable=True),
        sa.Column("school_name", sa.String(length=255), nullable=False),
        sa.Column("district", sa.String(length=120), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, comment="Draft, Submitted, Returned, Approved"),
        sa.Column("program_type", sa.String(length=64), nullable=True),
        sa.Column("payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_portal_records_district_date", "portal_records", ["district", "date"], unique=False)
    op.create_index("ix_portal_records_school_id", "portal_records", ["school_id"], unique=False)
    op.create_index("ix_portal_records_module", "portal_records", ["module"], unique=False)

    op.create_table(
        "cost_entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "category",
            sa.String(length=32),
            nullable=False,
            comment="transport, meals, printing, staff_time, materials, training, assessment, other",
        ),
        sa.Column("amount", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("scope_type", sa.String(length=32), nullable=False),
        sa.Column("scope_value", sa.String(length=255), nullable=False),
        sa.Column("period", sa.String(length=32), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cost_entries_period", "cost_entries", ["period"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_cost_entries_period", table_name="cost_entries")
    op.drop_table("cost_entries")
    op.drop_index("ix_portal_records_module", table_name="portal_records")
    op.drop_index("ix_portal_records_school_id", table_name="portal_records")
    op.drop_index("ix_portal_records_district_date", table_name="portal_records")
    op.drop_table("portal_records")
