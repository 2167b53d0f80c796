from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, SmallInteger, String, text
from sqlalchemy.dialects.postgresql import ARRAY, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class FreeDrinkWindow(Base):
    __tablename__ = "free_drink_windows"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_free_drink_windows_same_day"),
        CheckConstraint("days <@ ARRAY[1,2,3,4,5,6,7]::smallint[]", name="ck_free_drink_windows_days"),
        Index("idx_free_drink_windows_venue", "venue_id"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    venue_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("venues.id"), nullable=False)
    drink_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("venue_drinks.id"),
        nullable=True,
    )
    days: Mapped[list[int]] = mapped_column(ARRAY(SmallInteger), nullable=False)
    # zero-padded "HH:MM"; lexical order equals time order
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    timezone: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        server_default=text("'Europe/Budapest'"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
