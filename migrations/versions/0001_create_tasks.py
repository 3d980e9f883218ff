"""create tasks table"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_create_tasks"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "tasks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("frequency", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("created_by", sa.String(length=120), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("last_completed", sa.DateTime(), nullable=True),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("completion_comment", sa.Text(), nullable=True),
        sa.Column("completed_by", sa.String(length=120), nullable=True),
        sa.Column("completed_by_username", sa.String(length=120), nullable=True),
        sa.Column("evidence_ref", sa.String(length=500), nullable=True),
    )
    op.create_index("ix_tasks_frequency", "tasks", ["frequency"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_tasks_frequency", table_name="tasks")
    op.drop_table("tasks")
