from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.models.free_drink_windows import FreeDrinkWindow
from app.db.models.venues import Venue
from app.db.repo.venues_repo import VenuesRepo
from app.db.session import SessionLocal
from app.economy.availability.errors import DrinkNotFoundError, VenueNotFoundError
from app.economy.availability.evaluation import evaluate
from app.economy.availability.types import (
    AvailabilityResult,
    FreeDrinkStats,
    FreeDrinkView,
    VenueSnapshot,
)
from app.economy.caps.rules import compute_cap_status, parse_caps
from app.economy.caps.service import CapAccountingService
from app.economy.schedule.grouping import group_days, is_open_now, parse_opening_hours
from app.economy.schedule.rules import find_active, next_occurrence
from app.economy.schedule.types import ScheduleWindow

logger = structlog.get_logger(__name__)


def to_schedule_window(window: FreeDrinkWindow) -> ScheduleWindow:
    return ScheduleWindow(
        id=window.id,
        venue_id=window.venue_id,
        drink_id=window.drink_id,
        days=frozenset(int(day) for day in window.days),
        start_time=window.start_time,
        end_time=window.end_time,
        timezone=window.timezone,
    )


def venue_snapshot(venue: Venue) -> VenueSnapshot:
    return VenueSnapshot(
        venue_id=venue.id,
        is_paused=venue.is_paused,
        caps=parse_caps(venue.caps),
        timezone=venue.timezone or get_settings().default_venue_timezone,
    )


def _to_schedule_windows(windows: Iterable[FreeDrinkWindow]) -> list[ScheduleWindow]:
    return [to_schedule_window(window) for window in windows]


class AvailabilityService:
    @staticmethod
    async def evaluate_drink(
        session: AsyncSession,
        *,
        venue_id: UUID,
        drink_id: UUID | None,
        user_id: UUID | None,
        now_utc: datetime,
    ) -> AvailabilityResult:
        venue = await VenuesRepo.get_by_id(session, venue_id)
        if venue is None:
            raise VenueNotFoundError

        if drink_id is not None:
            drink = await VenuesRepo.get_drink(session, venue_id=venue_id, drink_id=drink_id)
            if drink is None:
                raise DrinkNotFoundError

        snapshot = venue_snapshot(venue)
        windows = _to_schedule_windows(
            await VenuesRepo.list_windows(session, venue_id=venue_id, drink_id=drink_id)
        )
        usage = await CapAccountingService.load_usage(
            session,
            venue_id=venue_id,
            timezone_name=snapshot.timezone,
            now_utc=now_utc,
            user_id=user_id,
        )
        settings = get_settings()
        result = evaluate(
            venue=snapshot,
            windows=windows,
            usage=usage,
            now_utc=now_utc,
            warn_pct=settings.cap_status_warn_pct,
            critical_pct=settings.cap_status_critical_pct,
        )
        logger.info(
            "free_drink_availability_evaluated",
            venue_id=str(venue_id),
            drink_id=str(drink_id) if drink_id is not None else None,
            is_available=result.is_available,
            reason=result.reason.value if result.reason is not None else None,
        )
        return result

    @staticmethod
    async def get_free_drink_stats(*, venue_id: UUID, now_utc: datetime) -> FreeDrinkStats:
        async with SessionLocal.begin() as session:
            venue = await VenuesRepo.get_by_id(session, venue_id)
            if venue is None:
                raise VenueNotFoundError

            snapshot = venue_snapshot(venue)
            drinks = await VenuesRepo.list_free_drinks(session, venue_id=venue_id)
            windows = _to_schedule_windows(
                await VenuesRepo.list_windows(session, venue_id=venue_id)
            )
            usage = await CapAccountingService.load_usage(
                session,
                venue_id=venue_id,
                timezone_name=snapshot.timezone,
                now_utc=now_utc,
            )

        settings = get_settings()
        cap_status = compute_cap_status(
            snapshot.caps,
            usage,
            warn_pct=settings.cap_status_warn_pct,
            critical_pct=settings.cap_status_critical_pct,
        )
        current_active_window = find_active(windows, now_utc)
        next_window = None if current_active_window is not None else next_occurrence(windows, now_utc)
        hours_by_day = parse_opening_hours(venue.opening_hours)

        return FreeDrinkStats(
            venue_id=venue_id,
            today_redemptions=usage.used_today,
            cap_usage_pct=cap_status.usage_pct,
            cap_status_label=cap_status.label,
            active_free_drinks=tuple(
                FreeDrinkView(
                    id=drink.id,
                    name=drink.drink_name,
                    image_url=drink.image_url,
                    category=drink.category,
                    windows=tuple(window for window in windows if window.drink_id in (drink.id, None)),
                )
                for drink in drinks
            ),
            current_active_window=current_active_window,
            next_window=next_window,
            caps=snapshot.caps,
            is_active_now=current_active_window is not None and not snapshot.is_paused,
            is_paused=snapshot.is_paused,
            opening_hours=tuple(group_days(hours_by_day)),
            is_venue_open=is_open_now(hours_by_day, instant=now_utc, timezone_name=snapshot.timezone),
        )
