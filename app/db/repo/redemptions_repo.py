from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import DateTime, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.redemptions import Redemption


class RedemptionsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, redemption: Redemption) -> Redemption:
        session.add(redemption)
        await session.flush()
        return redemption

    @staticmethod
    async def get_by_id(session: AsyncSession, redemption_id: UUID) -> Redemption | None:
        return await session.get(Redemption, redemption_id)

    @staticmethod
    async def get_by_id_for_update(
        session: AsyncSession,
        redemption_id: UUID,
    ) -> Redemption | None:
        stmt = select(Redemption).where(Redemption.id == redemption_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def count_success_since(
        session: AsyncSession,
        *,
        venue_id: UUID,
        since_utc: datetime,
        user_id: UUID | None = None,
    ) -> int:
        stmt = (
            select(func.count(Redemption.id))
            .where(
                Redemption.venue_id == venue_id,
                Redemption.status == "success",
                Redemption.redeemed_at >= since_utc,
            )
        )
        if user_id is not None:
            stmt = stmt.where(Redemption.user_id == user_id)
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def count_voids_by_actor_since(
        session: AsyncSession,
        *,
        actor_id: str,
        since_utc: datetime,
    ) -> int:
        voided_at = cast(Redemption.metadata_["voided_at"].astext, DateTime(timezone=True))
        stmt = select(func.count(Redemption.id)).where(
            Redemption.status == "void",
            Redemption.metadata_["voided_by"].astext == actor_id,
            voided_at >= since_utc,
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def list_success_history(
        session: AsyncSession,
        *,
        user_id: UUID,
        venue_id: UUID,
    ) -> list[tuple[datetime, Decimal]]:
        stmt = (
            select(Redemption.redeemed_at, Redemption.value)
            .where(
                Redemption.user_id == user_id,
                Redemption.venue_id == venue_id,
                Redemption.status == "success",
            )
            .order_by(Redemption.redeemed_at.asc())
        )
        result = await session.execute(stmt)
        return [(redeemed_at, value) for redeemed_at, value in result.all()]

    @staticmethod
    async def list_success_pairs_since(
        session: AsyncSession,
        *,
        since_utc: datetime,
        user_id: UUID | None = None,
        venue_id: UUID | None = None,
    ) -> list[tuple[UUID, UUID]]:
        stmt = select(Redemption.user_id, Redemption.venue_id).where(
            Redemption.status == "success",
            Redemption.redeemed_at >= since_utc,
        )
        if user_id is not None:
            stmt = stmt.where(Redemption.user_id == user_id)
        if venue_id is not None:
            stmt = stmt.where(Redemption.venue_id == venue_id)
        stmt = stmt.group_by(Redemption.user_id, Redemption.venue_id).order_by(
            func.max(Redemption.redeemed_at).asc()
        )
        result = await session.execute(stmt)
        return [(row_user_id, row_venue_id) for row_user_id, row_venue_id in result.all()]
