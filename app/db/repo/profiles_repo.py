from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.profiles import Profile
from app.db.models.user_points import UserPoints
from app.db.models.venue_memberships import VenueMembership


class ProfilesRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, profile_id: UUID) -> Profile | None:
        return await session.get(Profile, profile_id)

    @staticmethod
    async def list_memberships(
        session: AsyncSession,
        *,
        profile_id: UUID,
    ) -> list[VenueMembership]:
        stmt = (
            select(VenueMembership)
            .where(VenueMembership.profile_id == profile_id)
            .order_by(VenueMembership.created_at.asc(), VenueMembership.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_points_balance(session: AsyncSession, *, user_id: UUID) -> int:
        stmt = select(UserPoints.balance).where(UserPoints.user_id == user_id)
        result = await session.execute(stmt)
        balance = result.scalar_one_or_none()
        return int(balance or 0)

    @staticmethod
    async def get_names(session: AsyncSession, profile_ids: Iterable[UUID]) -> dict[UUID, str]:
        ids = list(set(profile_ids))
        if not ids:
            return {}
        stmt = select(Profile.id, Profile.name).where(Profile.id.in_(ids))
        result = await session.execute(stmt)
        return {profile_id: name for profile_id, name in result.all() if name}

    @staticmethod
    async def add_points(
        session: AsyncSession,
        *,
        user_id: UUID,
        amount: int,
        now_utc: datetime,
    ) -> int:
        stmt = (
            pg_insert(UserPoints)
            .values(user_id=user_id, balance=amount, updated_at=now_utc)
            .on_conflict_do_update(
                index_elements=[UserPoints.user_id],
                set_={
                    "balance": UserPoints.balance + amount,
                    "updated_at": now_utc,
                },
            )
            .returning(UserPoints.balance)
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())
