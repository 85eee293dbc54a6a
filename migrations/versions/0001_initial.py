"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2024-01-01 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "cash_count_records",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("submission_id", sa.String(length=64), nullable=False),
        sa.Column("store", sa.String(length=120), nullable=False),
        sa.Column("operator", sa.String(length=255), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False),
        sa.Column("date", sa.String(length=32), nullable=False),
        sa.Column("time", sa.String(length=64), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.Column("totals", sa.JSON(), nullable=False),
        sa.Column("denominations", sa.JSON(), nullable=False),
        sa.Column("total_checked", sa.Numeric(12, 2), nullable=True),
        sa.Column("discrepancy", sa.Numeric(12, 2), nullable=True),
        sa.Column("checked_counts", sa.JSON(), nullable=True),
        sa.Column("recorded_at", sa.DateTime(), nullable=False),
        sa.Column("checked_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_cash_count_records_submission_id", "cash_count_records", ["submission_id"])
    op.create_index("ix_cash_count_records_store", "cash_count_records", ["store"])
    op.create_index("ix_cash_count_records_time", "cash_count_records", ["time"])

    op.create_table(
        "safe_owed_balances",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("store", sa.String(length=120), nullable=False),
        sa.Column("denomination_id", sa.String(length=16), nullable=False),
        sa.Column("units", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("store", "denomination_id", name="uq_safe_owed_store_denomination"),
    )
    op.create_index("ix_safe_owed_balances_store", "safe_owed_balances", ["store"])


def downgrade() -> None:
    op.drop_index("ix_safe_owed_balances_store", table_name="safe_owed_balances")
    op.drop_table("safe_owed_balances")
    op.drop_index("ix_cash_count_records_time", table_name="cash_count_records")
    op.drop_index("ix_cash_count_records_store", table_name="cash_count_records")
    op.drop_index("ix_cash_count_records_submission_id", table_name="cash_count_records")
    op.drop_table("cash_count_records")
