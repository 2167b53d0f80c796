from __future__ import annotations

from uuid import UUID

from sqlalchemy import BOOLEAN, ForeignKey, Index, String, Text, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class VenueDrink(Base):
    __tablename__ = "venue_drinks"
    __table_args__ = (Index("idx_venue_drinks_venue_free", "venue_id", "is_free_drink"),)

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    venue_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("venues.id"), nullable=False)
    drink_name: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_free_drink: Mapped[bool] = mapped_column(BOOLEAN, nullable=False, server_default=text("false"))
