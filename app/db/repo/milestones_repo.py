from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.loyalty_milestones import LoyaltyMilestone


class MilestonesRepo:
    @staticmethod
    async def list_types_for_pair(
        session: AsyncSession,
        *,
        user_id: UUID,
        venue_id: UUID,
    ) -> set[str]:
        stmt = select(LoyaltyMilestone.milestone_type).where(
            LoyaltyMilestone.user_id == user_id,
            LoyaltyMilestone.venue_id == venue_id,
        )
        result = await session.execute(stmt)
        return set(result.scalars().all())

    @staticmethod
    async def insert_if_absent(
        session: AsyncSession,
        *,
        milestone_id: UUID,
        user_id: UUID,
        venue_id: UUID,
        milestone_type: str,
        visit_count: int,
        total_spend: Decimal,
        achieved_at: datetime,
        admin_notified: bool,
    ) -> bool:
        stmt = (
            pg_insert(LoyaltyMilestone)
            .values(
                id=milestone_id,
                user_id=user_id,
                venue_id=venue_id,
                milestone_type=milestone_type,
                visit_count=visit_count,
                total_spend=total_spend,
                achieved_at=achieved_at,
                admin_notified=admin_notified,
            )
            .on_conflict_do_nothing(
                index_elements=[
                    LoyaltyMilestone.user_id,
                    LoyaltyMilestone.venue_id,
                    LoyaltyMilestone.milestone_type,
                ]
            )
            .returning(LoyaltyMilestone.id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def get_by_id_for_update(
        session: AsyncSession,
        milestone_id: UUID,
    ) -> LoyaltyMilestone | None:
        stmt = select(LoyaltyMilestone).where(LoyaltyMilestone.id == milestone_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_pending_alerts(
        session: AsyncSession,
        *,
        limit: int = 50,
    ) -> list[LoyaltyMilestone]:
        stmt = (
            select(LoyaltyMilestone)
            .where(
                LoyaltyMilestone.admin_notified.is_(False),
                LoyaltyMilestone.admin_dismissed.is_(False),
            )
            .order_by(LoyaltyMilestone.achieved_at.desc(), LoyaltyMilestone.id.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def count_achieved_since(session: AsyncSession, *, since_utc: datetime) -> int:
        stmt = select(func.count(LoyaltyMilestone.id)).where(
            LoyaltyMilestone.achieved_at >= since_utc
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def mark_dismissed(session: AsyncSession, *, milestone_id: UUID) -> bool:
        stmt = (
            update(LoyaltyMilestone)
            .where(LoyaltyMilestone.id == milestone_id)
            .values(admin_notified=True, admin_dismissed=True)
        )
        result = await session.execute(stmt)
        return bool(result.rowcount)

    @staticmethod
    async def mark_reward_sent(
        session: AsyncSession,
        *,
        milestone_id: UUID,
        reward_type: str,
        reward_message: str | None,
        sent_at: datetime,
    ) -> bool:
        stmt = (
            update(LoyaltyMilestone)
            .where(
                LoyaltyMilestone.id == milestone_id,
                LoyaltyMilestone.reward_sent.is_(False),
            )
            .values(
                reward_sent=True,
                reward_type=reward_type,
                reward_sent_at=sent_at,
                reward_message=reward_message,
                admin_notified=True,
            )
        )
        result = await session.execute(stmt)
        return bool(result.rowcount)
