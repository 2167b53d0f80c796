from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.user_qr_tokens import UserQRToken


class QrTokensRepo:
    @staticmethod
    async def create(session: AsyncSession, *, token: UserQRToken) -> UserQRToken:
        session.add(token)
        await session.flush()
        return token

    @staticmethod
    async def get_by_hash(session: AsyncSession, token_hash: str) -> UserQRToken | None:
        stmt = select(UserQRToken).where(UserQRToken.token_hash == token_hash)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_hash_for_update(session: AsyncSession, token_hash: str) -> UserQRToken | None:
        stmt = select(UserQRToken).where(UserQRToken.token_hash == token_hash).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def delete_by_id(session: AsyncSession, token_id: UUID) -> int:
        result = await session.execute(delete(UserQRToken).where(UserQRToken.id == token_id))
        return int(result.rowcount or 0)

    @staticmethod
    async def mark_used_if_unused(
        session: AsyncSession,
        *,
        token_id: UUID,
        used_at: datetime,
    ) -> bool:
        stmt = (
            update(UserQRToken)
            .where(
                UserQRToken.id == token_id,
                UserQRToken.used_at.is_(None),
            )
            .values(used_at=used_at)
        )
        result = await session.execute(stmt)
        return bool(result.rowcount)

    @staticmethod
    async def attach_redemption(
        session: AsyncSession,
        *,
        token_id: UUID,
        redemption_id: UUID,
    ) -> bool:
        stmt = (
            update(UserQRToken)
            .where(
                UserQRToken.id == token_id,
                UserQRToken.used_at.is_not(None),
                UserQRToken.redemption_id.is_(None),
            )
            .values(redemption_id=redemption_id)
        )
        result = await session.execute(stmt)
        return bool(result.rowcount)

    @staticmethod
    async def delete_expired(session: AsyncSession, *, now_utc: datetime) -> int:
        stmt = delete(UserQRToken).where(
            UserQRToken.expires_at < now_utc,
            UserQRToken.used_at.is_(None),
        )
        result = await session.execute(stmt)
        return int(result.rowcount or 0)
