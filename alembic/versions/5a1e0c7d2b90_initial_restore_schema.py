"""Initial schema: tasks, tags, task_tags, sync_links

Revision ID: 5a1e0c7d2b90
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5a1e0c7d2b90"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "tasks",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("source_type", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("importance", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("hide_until", sa.DateTime(), nullable=True),
        sa.Column("timer_start", sa.DateTime(), nullable=True),
        sa.Column("last_notified", sa.DateTime(), nullable=True),
        sa.Column("estimated_seconds", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("elapsed_seconds", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("postpone_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reminder_period_ms", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("reminder_flags", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("recurrence_rule", sa.String(), nullable=True),
    )
    op.create_index(op.f("ix_tasks_source_type"), "tasks", ["source_type"], unique=False)
    op.create_index(op.f("ix_tasks_title"), "tasks", ["title"], unique=False)
    op.create_index(op.f("ix_tasks_created_at"), "tasks", ["created_at"], unique=False)

    op.create_table(
        "tags",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(op.f("ix_tags_name"), "tags", ["name"], unique=True)

    op.create_table(
        "task_tags",
        sa.Column("task_id", sa.String(), sa.ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("tag_id", sa.String(), sa.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "sync_links",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("task_id", sa.String(), sa.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("service", sa.String(), nullable=False),
        sa.Column("remote_task_id", sa.BigInteger(), nullable=False),
        sa.Column("remote_series_id", sa.BigInteger(), nullable=False),
        sa.Column("remote_list_id", sa.BigInteger(), nullable=False),
        sa.Column("repeating", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("task_id", "service", name="uq_sync_link_task_service"),
    )
    op.create_index(op.f("ix_sync_links_task_id"), "sync_links", ["task_id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_sync_links_task_id"), table_name="sync_links")
    op.drop_table("sync_links")
    op.drop_table("task_tags")
    op.drop_index(op.f("ix_tags_name"), table_name="tags")
    op.drop_table("tags")
    op.drop_index(op.f("ix_tasks_created_at"), table_name="tasks")
    op.drop_index(op.f("ix_tasks_title"), table_name="tasks")
    op.drop_index(op.f("ix_tasks_source_type"), table_name="tasks")
    op.drop_table("tasks")
