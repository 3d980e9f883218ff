"""create task preferences table"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0004_create_task_preferences"
down_revision = "0003_create_audit_log"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "task_preferences",
        sa.Column("username", sa.String(length=120), primary_key=True),
        sa.Column(
            "task_id",
            sa.Integer(),
            sa.ForeignKey("tasks.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("preference", sa.String(length=20), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("task_preferences")
