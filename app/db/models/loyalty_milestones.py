from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    BOOLEAN,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class LoyaltyMilestone(Base):
    __tablename__ = "loyalty_milestones"
    __table_args__ = (
        CheckConstraint(
            "milestone_type IN ('first_visit','returning','weekly_regular','monthly_vip','platinum','legendary')",
            name="ck_loyalty_milestones_type",
        ),
        UniqueConstraint(
            "user_id",
            "venue_id",
            "milestone_type",
            name="uq_loyalty_milestones_user_venue_type",
        ),
        Index("idx_loyalty_milestones_pending", "admin_notified", "admin_dismissed", "achieved_at"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    user_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    venue_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("venues.id"), nullable=False)
    milestone_type: Mapped[str] = mapped_column(String(32), nullable=False)
    visit_count: Mapped[int] = mapped_column(Integer, nullable=False)
    total_spend: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, server_default=text("0"))
    achieved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    admin_notified: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("false"))
    admin_dismissed: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("false"))
    reward_sent: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("false"))
    reward_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    reward_sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reward_message: Mapped[str | None] = mapped_column(Text, nullable=True)
