"""create overtime entries table"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0002_create_overtime_entries"
down_revision = "0001_create_tasks"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "overtime_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=120), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("minutes", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("is_add", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
        sa.UniqueConstraint("username", "timestamp", name="uq_overtime_username_timestamp"),
    )
    op.create_index("ix_overtime_entries_username", "overtime_entries", ["username"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_overtime_entries_username", table_name="overtime_entries")
    op.drop_table("overtime_entries")
