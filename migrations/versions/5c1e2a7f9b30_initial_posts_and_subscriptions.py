"""initial posts and push subscriptions

Revision ID: 5c1e2a7f9b30
Revises:
Create Date: 2026-10-19 09:12:41.508213

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e2a7f9b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the post and notification_subscription tables."""
    op.create_table(
        "post",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("activity", sa.Text(), nullable=False),
        sa.Column("location", sa.Text(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("hours", sa.Integer(), nullable=False),
        sa.Column("neighborhood", sa.Text(), nullable=True),
        sa.Column("locality", sa.Text(), nullable=True),
        sa.Column("district", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("session_id", sa.Text(), nullable=False),
        sa.CheckConstraint("hours >= 1 AND hours <= 24", name="ck_post_hours_range"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_latitude", "post", ["latitude"])
    op.create_index("ix_post_created_at", "post", ["created_at"])
    op.create_index("ix_post_start_time", "post", ["start_time"])
    op.create_index("ix_post_session_id", "post", ["session_id"])

    op.create_table(
        "notification_subscription",
        sa.Column("endpoint", sa.Text(), nullable=False),
        sa.Column("p256dh", sa.Text(), nullable=False),
        sa.Column("auth", sa.Text(), nullable=False),
        sa.Column("session_id", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("endpoint"),
    )
    op.create_index(
        "ix_notification_subscription_session_id",
        "notification_subscription",
        ["session_id"],
    )


def downgrade() -> None:
    """Drop both tables."""
    op.drop_index(
        "ix_notification_subscription_session_id",
        table_name="notification_subscription",
    )
    op.drop_table("notification_subscription")
    op.drop_index("ix_post_session_id", table_name="post")
    op.drop_index("ix_post_start_time", table_name="post")
    op.drop_index("ix_post_created_at", table_name="post")
    op.drop_index("ix_post_latitude", table_name="post")
    op.drop_table("post")
