"""core_free_drink_data_model

Revision ID: 7c1e4b2a9d03
Revises:
Create Date: 2026-10-12 09:30:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "7c1e4b2a9d03"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )

    op.create_table(
        "venues",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("is_paused", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("caps", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("timezone", sa.String(64), nullable=False, server_default=sa.text("'Europe/Budapest'")),
        sa.Column("opening_hours", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )

    op.create_table(
        "venue_memberships",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("profile_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("venue_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("role IN ('owner','staff')", name="ck_venue_memberships_role"),
        sa.ForeignKeyConstraint(["profile_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["venue_id"], ["venues.id"]),
        sa.UniqueConstraint("profile_id", "venue_id", name="uq_venue_memberships_profile_venue"),
    )
    op.create_index("idx_venue_memberships_profile", "venue_memberships", ["profile_id"])

    op.create_table(
        "venue_drinks",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("venue_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("drink_name", sa.Text(), nullable=False),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("is_free_drink", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.ForeignKeyConstraint(["venue_id"], ["venues.id"]),
    )
    op.create_index("idx_venue_drinks_venue_free", "venue_drinks", ["venue_id", "is_free_drink"])

    op.create_table(
        "free_drink_windows",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("venue_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("drink_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("days", postgresql.ARRAY(sa.SmallInteger()), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("timezone", sa.String(64), nullable=False, server_default=sa.text("'Europe/Budapest'")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("start_time < end_time", name="ck_free_drink_windows_same_day"),
        sa.CheckConstraint("days <@ ARRAY[1,2,3,4,5,6,7]::smallint[]", name="ck_free_drink_windows_days"),
        sa.ForeignKeyConstraint(["venue_id"], ["venues.id"]),
        sa.ForeignKeyConstraint(["drink_id"], ["venue_drinks.id"]),
    )
    op.create_index("idx_free_drink_windows_venue", "free_drink_windows", ["venue_id"])

    op.create_table(
        "redemptions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("venue_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("drink", sa.Text(), nullable=False),
        sa.Column("drink_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("value", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("redeemed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column(
            "metadata",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.CheckConstraint(
            "status IN ('pending','success','void','failed','expired')",
            name="ck_redemptions_status",
        ),
        sa.ForeignKeyConstraint(["venue_id"], ["venues.id"]),
        sa.ForeignKeyConstraint(["drink_id"], ["venue_drinks.id"]),
    )
    op.create_index(
        "idx_redemptions_venue_status_time",
        "redemptions",
        ["venue_id", "status", "redeemed_at"],
    )
    op.create_index(
        "idx_redemptions_user_venue_status",
        "redemptions",
        ["user_id", "venue_id", "status"],
    )
    op.create_index("idx_redemptions_status_time", "redemptions", ["status", "redeemed_at"])

    op.create_table(
        "user_qr_tokens",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("token_hash", sa.CHAR(64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"]),
        sa.UniqueConstraint("token_hash", name="uq_user_qr_tokens_token_hash"),
    )
    op.create_index("idx_user_qr_tokens_expires_at", "user_qr_tokens", ["expires_at"])

    op.create_table(
        "user_points",
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("balance", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("balance >= 0", name="ck_user_points_balance_non_negative"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "loyalty_milestones",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("venue_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("milestone_type", sa.String(32), nullable=False),
        sa.Column("visit_count", sa.Integer(), nullable=False),
        sa.Column("total_spend", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("achieved_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("admin_notified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("admin_dismissed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("reward_sent", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("reward_type", sa.String(32), nullable=True),
        sa.Column("reward_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reward_message", sa.Text(), nullable=True),
        sa.CheckConstraint(
            "milestone_type IN ('first_visit','returning','weekly_regular','monthly_vip','platinum','legendary')",
            name="ck_loyalty_milestones_type",
        ),
        sa.ForeignKeyConstraint(["venue_id"], ["venues.id"]),
        sa.UniqueConstraint(
            "user_id",
            "venue_id",
            "milestone_type",
            name="uq_loyalty_milestones_user_venue_type",
        ),
    )
    op.create_index(
        "idx_loyalty_milestones_pending",
        "loyalty_milestones",
        ["admin_notified", "admin_dismissed", "achieved_at"],
    )


def downgrade() -> None:
    op.drop_index("idx_loyalty_milestones_pending", table_name="loyalty_milestones")
    op.drop_table("loyalty_milestones")
    op.drop_table("user_points")
    op.drop_index("idx_user_qr_tokens_expires_at", table_name="user_qr_tokens")
    op.drop_table("user_qr_tokens")
    op.drop_index("idx_redemptions_status_time", table_name="redemptions")
    op.drop_index("idx_redemptions_user_venue_status", table_name="redemptions")
    op.drop_index("idx_redemptions_venue_status_time", table_name="redemptions")
    op.drop_table("redemptions")
    op.drop_index("idx_free_drink_windows_venue", table_name="free_drink_windows")
    op.drop_table("free_drink_windows")
    op.drop_index("idx_venue_drinks_venue_free", table_name="venue_drinks")
    op.drop_table("venue_drinks")
    op.drop_index("idx_venue_memberships_profile", table_name="venue_memberships")
    op.drop_table("venue_memberships")
    op.drop_table("venues")
    op.drop_table("profiles")
