from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.free_drink_windows import FreeDrinkWindow
from app.db.models.venue_drinks import VenueDrink
from app.db.models.venues import Venue


class VenuesRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, venue_id: UUID) -> Venue | None:
        return await session.get(Venue, venue_id)

    @staticmethod
    async def get_drink(
        session: AsyncSession,
        *,
        venue_id: UUID,
        drink_id: UUID,
    ) -> VenueDrink | None:
        stmt = select(VenueDrink).where(
            VenueDrink.id == drink_id,
            VenueDrink.venue_id == venue_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_free_drinks(session: AsyncSession, *, venue_id: UUID) -> list[VenueDrink]:
        stmt = (
            select(VenueDrink)
            .where(
                VenueDrink.venue_id == venue_id,
                VenueDrink.is_free_drink.is_(True),
            )
            .order_by(VenueDrink.drink_name.asc(), VenueDrink.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_windows(
        session: AsyncSession,
        *,
        venue_id: UUID,
        drink_id: UUID | None = None,
    ) -> list[FreeDrinkWindow]:
        stmt = (
            select(FreeDrinkWindow)
            .where(FreeDrinkWindow.venue_id == venue_id)
            .order_by(FreeDrinkWindow.start_time.asc(), FreeDrinkWindow.id.asc())
        )
        if drink_id is not None:
            stmt = stmt.where(
                or_(
                    FreeDrinkWindow.drink_id == drink_id,
                    FreeDrinkWindow.drink_id.is_(None),
                )
            )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_names(session: AsyncSession, venue_ids: Iterable[UUID]) -> dict[UUID, str]:
        ids = list(set(venue_ids))
        if not ids:
            return {}
        stmt = select(Venue.id, Venue.name).where(Venue.id.in_(ids))
        result = await session.execute(stmt)
        return {venue_id: name for venue_id, name in result.all()}
