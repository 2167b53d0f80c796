"""link_qr_tokens_to_redemptions

Revision ID: a4d2f8c61e57
Revises: 7c1e4b2a9d03
Create Date: 2026-10-19 10:15:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "a4d2f8c61e57"
down_revision: str | None = "7c1e4b2a9d03"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.add_column(
        "user_qr_tokens",
        sa.Column("redemption_id", postgresql.UUID(as_uuid=True), nullable=True),
    )
    op.create_foreign_key(
        "fk_user_qr_tokens_redemption_id_redemptions",
        "user_qr_tokens",
        "redemptions",
        ["redemption_id"],
        ["id"],
    )
    op.create_unique_constraint(
        "uq_user_qr_tokens_redemption_id",
        "user_qr_tokens",
        ["redemption_id"],
    )


def downgrade() -> None:
    op.drop_constraint("uq_user_qr_tokens_redemption_id", "user_qr_tokens", type_="unique")
    op.drop_constraint("fk_user_qr_tokens_redemption_id_redemptions", "user_qr_tokens", type_="foreignkey")
    op.drop_column("user_qr_tokens", "redemption_id")
