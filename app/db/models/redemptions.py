from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Numeric, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class Redemption(Base):
    __tablename__ = "redemptions"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending','success','void','failed','expired')",
            name="ck_redemptions_status",
        ),
        Index("idx_redemptions_venue_status_time", "venue_id", "status", "redeemed_at"),
        Index("idx_redemptions_user_venue_status", "user_id", "venue_id", "status"),
        Index("idx_redemptions_status_time", "status", "redeemed_at"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    user_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    venue_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("venues.id"), nullable=False)
    drink: Mapped[str] = mapped_column(Text, nullable=False)
    drink_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("venue_drinks.id"),
        nullable=True,
    )
    value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, server_default=text("0"))
    redeemed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    metadata_: Mapped[dict[str, object]] = mapped_column(
        "metadata",
        JSONB,
        nullable=False,
        server_default=text("'{}'::jsonb"),
    )
