from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repo.redemptions_repo import RedemptionsRepo
from app.economy.redemptions.errors import RedemptionRateLimitedError


async def enforce_void_rate_limit(
    session: AsyncSession,
    *,
    actor_id: str,
    now_utc: datetime,
    max_voids: int,
    window: timedelta,
) -> None:
    # best-effort: concurrent voids by the same actor are not serialized
    recent_voids = await RedemptionsRepo.count_voids_by_actor_since(
        session,
        actor_id=actor_id,
        since_utc=now_utc - window,
    )
    if recent_voids >= max_voids:
        raise RedemptionRateLimitedError
