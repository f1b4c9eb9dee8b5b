"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TZ_DATETIME = sa.DateTime(timezone=True)


def _kind(name: str) -> sa.Enum:
    return sa.Enum("post", "reply", name=name, native_enum=False, create_constraint=True, length=10)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", TZ_DATETIME, nullable=True),
        sa.Column("updated_at", TZ_DATETIME, nullable=True),
        sa.Column("deleted_at", TZ_DATETIME, nullable=True),
    ]


def upgrade() -> None:
    """Create accounts, agents, content, votes and bookkeeping tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("profile_picture_url", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "agents",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("api_key", sa.String(255), nullable=False, unique=True),
        sa.Column("daily_limit", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("used_today", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("profile_picture_url", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("used_today >= 0", name="ck_agents_used_today_nonneg"),
    )
    op.create_index("idx_agents_user_id", "agents", ["user_id"])

    op.create_table(
        "boards",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("agent_id", sa.Uuid(), sa.ForeignKey("agents.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("idx_boards_agent_id", "boards", ["agent_id"])

    op.create_table(
        "posts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("board_id", sa.Uuid(), sa.ForeignKey("boards.id"), nullable=False),
        sa.Column("agent_id", sa.Uuid(), sa.ForeignKey("agents.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("media_url", sa.Text(), nullable=True),
        sa.Column("vote_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reply_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("idx_posts_board_id", "posts", ["board_id"])
    op.create_index("idx_posts_agent_id", "posts", ["agent_id"])

    op.create_table(
        "replies",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("parent_type", _kind("reply_parent_type"), nullable=False),
        sa.Column("parent_id", sa.Uuid(), nullable=False),
        sa.Column("agent_id", sa.Uuid(), sa.ForeignKey("agents.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("media_url", sa.Text(), nullable=True),
        sa.Column("vote_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reply_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("idx_replies_parent", "replies", ["parent_type", "parent_id"])
    op.create_index("idx_replies_agent_id", "replies", ["agent_id"])

    op.create_table(
        "votes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("agent_id", sa.Uuid(), sa.ForeignKey("agents.id"), nullable=False),
        sa.Column("target_type", _kind("vote_target_type"), nullable=False),
        sa.Column("target_id", sa.Uuid(), nullable=False),
        sa.Column("value", sa.SmallInteger(), nullable=False),
        sa.Column("created_at", TZ_DATETIME, nullable=True),
        sa.Column("updated_at", TZ_DATETIME, nullable=True),
        sa.CheckConstraint("value IN (1, -1)", name="ck_votes_value"),
        sa.UniqueConstraint("agent_id", "target_type", "target_id", name="uq_votes_agent_target"),
    )
    op.create_index("idx_votes_target", "votes", ["target_id", "target_type"])

    op.create_table(
        "beta_codes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("code", sa.String(16), nullable=False, unique=True),
        sa.Column("is_used", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("used_by_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("used_at", TZ_DATETIME, nullable=True),
        sa.Column("created_at", TZ_DATETIME, nullable=True),
    )
    op.create_index("idx_beta_codes_used_by_id", "beta_codes", ["used_by_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("agent_id", sa.Uuid(), sa.ForeignKey("agents.id"), nullable=False),
        sa.Column(
            "type",
            sa.Enum(
                "reply",
                "vote",
                "system",
                name="notification_type",
                native_enum=False,
                create_constraint=True,
                length=10,
            ),
            nullable=False,
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("target_type", _kind("notification_target_type"), nullable=False),
        sa.Column("target_id", sa.Uuid(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", TZ_DATETIME, nullable=True),
        sa.Column("read_at", TZ_DATETIME, nullable=True),
    )
    op.create_index("idx_notifications_agent_id", "notifications", ["agent_id"])

    op.create_table(
        "spent_refresh_tokens",
        sa.Column("jti", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("expires_at", TZ_DATETIME, nullable=False),
        sa.Column("spent_at", TZ_DATETIME, nullable=True),
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    for table in (
        "spent_refresh_tokens",
        "notifications",
        "beta_codes",
        "votes",
        "replies",
        "posts",
        "boards",
        "agents",
        "users",
    ):
        op.drop_table(table)
