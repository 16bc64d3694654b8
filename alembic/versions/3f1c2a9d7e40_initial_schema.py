"""initial schema: users, live_sessions, inventory_buy_menus

Revision ID: 3f1c2a9d7e40
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7e40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _network_block(prefix: str) -> list[sa.Column]:
    return [
        sa.Column(f"{prefix}_ip_address", sa.String(length=64), nullable=False),
        sa.Column(f"{prefix}_client_port", sa.Integer(), nullable=False),
        sa.Column(f"{prefix}_server_port", sa.Integer(), nullable=False),
        sa.Column(f"{prefix}_tv_port", sa.Integer(), nullable=False),
    ]


def upgrade() -> None:
    """Create users, live sessions (unique per user) and buy menus."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("playername", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.String(length=512), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("playername"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "live_sessions",
        sa.Column("session_id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_network_block("external"),
        *_network_block("internal"),
        sa.Column("current_channel_server_index", sa.Integer(), nullable=False),
        sa.Column("current_channel_index", sa.Integer(), nullable=False),
        sa.Column("current_room_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("session_id"),
    )
    op.create_index("ux_live_sessions_user_id", "live_sessions", ["user_id"], unique=True)

    op.create_table(
        "inventory_buy_menus",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *[
            sa.Column(name, sa.JSON(), nullable=False)
            for name in (
                "pistols", "shotguns", "smgs", "rifles",
                "snipers", "machineguns", "melees", "equipment",
            )
        ],
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ux_inventory_buy_menus_user_id",
        "inventory_buy_menus",
        ["user_id"],
        unique=True,
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("ux_inventory_buy_menus_user_id", table_name="inventory_buy_menus")
    op.drop_table("inventory_buy_menus")
    op.drop_index("ux_live_sessions_user_id", table_name="live_sessions")
    op.drop_table("live_sessions")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
