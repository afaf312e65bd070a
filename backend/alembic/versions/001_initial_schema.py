"""Initial schema: users, events, event memberships and id sequences.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("cart_id", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("our_id", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.String(2000), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("image", sa.String(1024), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("max_attendees", sa.Integer(), nullable=True),
        sa.Column("creator_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("max_attendees IS NULL OR max_attendees > 0", name="check_max_attendees_positive"),
    )
    op.create_index("ix_events_id", "events", ["id"])
    op.create_index("ix_events_our_id", "events", ["our_id"], unique=True)
    op.create_index("ix_events_creator_id", "events", ["creator_id"])
    # Sorted listing orders by start date
    op.create_index("ix_events_date", "events", ["date"])

    op.create_table(
        "event_memberships",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "event_id", name="uq_user_event_membership"),
    )
    op.create_index("ix_event_memberships_id", "event_memberships", ["id"])
    op.create_index("ix_event_memberships_user_id", "event_memberships", ["user_id"])
    op.create_index("ix_event_memberships_event_id", "event_memberships", ["event_id"])

    sequences = op.create_table(
        "sequences",
        sa.Column("name", sa.String(50), primary_key=True),
        sa.Column("value", sa.Integer(), nullable=False, server_default=sa.text("0")),
    )
    op.bulk_insert(sequences, [{"name": "event", "value": 0}])


def downgrade() -> None:
    op.drop_table("sequences")
    op.drop_table("event_memberships")
    op.drop_table("events")
    op.drop_table("users")
