from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.repo.redemptions_repo import RedemptionsRepo
from app.economy.caps.rules import compute_cap_status
from app.economy.caps.time import local_day_start_utc, local_hour_start_utc
from app.economy.caps.types import Caps, CapStatus, CapUsage


class CapAccountingService:
    @staticmethod
    async def load_usage(
        session: AsyncSession,
        *,
        venue_id: UUID,
        timezone_name: str,
        now_utc: datetime,
        user_id: UUID | None = None,
    ) -> CapUsage:
        """Counts successful redemptions for the venue-local day and hour.

        Counts are snapshots. Concurrent confirmations may both see a free slot.
        """
        day_start = local_day_start_utc(now_utc, timezone_name)
        hour_start = local_hour_start_utc(now_utc, timezone_name)

        used_today = await RedemptionsRepo.count_success_since(
            session,
            venue_id=venue_id,
            since_utc=day_start,
        )
        used_this_hour = await RedemptionsRepo.count_success_since(
            session,
            venue_id=venue_id,
            since_utc=hour_start,
        )
        used_by_user_today = 0
        if user_id is not None:
            used_by_user_today = await RedemptionsRepo.count_success_since(
                session,
                venue_id=venue_id,
                since_utc=day_start,
                user_id=user_id,
            )

        return CapUsage(
            used_today=used_today,
            used_this_hour=used_this_hour,
            used_by_user_today=used_by_user_today,
        )

    @staticmethod
    def status_for(caps: Caps, usage: CapUsage) -> CapStatus:
        settings = get_settings()
        return compute_cap_status(
            caps,
            usage,
            warn_pct=settings.cap_status_warn_pct,
            critical_pct=settings.cap_status_critical_pct,
        )
