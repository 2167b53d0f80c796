from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class VenueMembership(Base):
    __tablename__ = "venue_memberships"
    __table_args__ = (
        CheckConstraint("role IN ('owner','staff')", name="ck_venue_memberships_role"),
        UniqueConstraint("profile_id", "venue_id", name="uq_venue_memberships_profile_venue"),
        Index("idx_venue_memberships_profile", "profile_id"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    profile_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id"),
        nullable=False,
    )
    venue_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("venues.id"), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
