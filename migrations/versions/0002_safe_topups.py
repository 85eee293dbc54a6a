"""safe top-ups

Revision ID: 0002_safe_topups
Revises: 0001_initial
Create Date: 2024-02-01 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0002_safe_topups"
down_revision = "0001_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "safe_topups",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("store", sa.String(length=120), nullable=False),
        sa.Column("operator", sa.String(length=255), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False),
        sa.Column("date", sa.String(length=32), nullable=False),
        sa.Column("time", sa.String(length=64), nullable=False),
        sa.Column("units", sa.JSON(), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.Column("recorded_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_safe_topups_store", "safe_topups", ["store"])


def downgrade() -> None:
    op.drop_index("ix_safe_topups_store", table_name="safe_topups")
    op.drop_table("safe_topups")
