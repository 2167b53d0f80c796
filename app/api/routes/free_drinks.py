from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException

from app.economy.availability.errors import VenueNotFoundError
from app.economy.availability.service import AvailabilityService
from app.economy.availability.types import FreeDrinkStats
from app.economy.schedule.types import DayGroup, ScheduleWindow

from .access import error_detail
from .free_drinks_models import (
    CapsResponse,
    FreeDrinkResponse,
    FreeDrinkStatsRequest,
    FreeDrinkStatsResponse,
    OpeningHoursGroupResponse,
    ScheduleWindowResponse,
)

router = APIRouter(tags=["free-drinks"])


def _window_response(window: ScheduleWindow | None) -> ScheduleWindowResponse | None:
    if window is None:
        return None
    return ScheduleWindowResponse(
        id=window.id,
        drink_id=window.drink_id,
        days=sorted(window.days),
        start_time=window.start_time,
        end_time=window.end_time,
        timezone=window.timezone,
    )


def _opening_hours_response(group: DayGroup) -> OpeningHoursGroupResponse:
    return OpeningHoursGroupResponse(
        days=list(group.days),
        label=group.label,
        open=group.hours.open_time if group.hours is not None else None,
        close=group.hours.close_time if group.hours is not None else None,
        closed=group.is_closed,
    )


def _as_response(stats: FreeDrinkStats) -> FreeDrinkStatsResponse:
    return FreeDrinkStatsResponse(
        today_redemptions=stats.today_redemptions,
        cap_usage_pct=stats.cap_usage_pct,
        cap_status=stats.cap_status_label,
        active_free_drinks=[
            FreeDrinkResponse(
                id=drink.id,
                name=drink.name,
                image_url=drink.image_url,
                category=drink.category,
                windows=[_window_response(window) for window in drink.windows],
            )
            for drink in stats.active_free_drinks
        ],
        current_active_window=_window_response(stats.current_active_window),
        next_window=_window_response(stats.next_window),
        caps=CapsResponse(
            daily=stats.caps.daily,
            hourly=stats.caps.hourly,
            per_user_daily=stats.caps.per_user_daily,
            on_exhaust=stats.caps.on_exhaust.value,
            alt_offer_text=stats.caps.alt_offer_text,
        ),
        is_active_now=stats.is_active_now,
        is_paused=stats.is_paused,
        opening_hours=[_opening_hours_response(group) for group in stats.opening_hours],
        is_venue_open=stats.is_venue_open,
    )


@router.post("/free-drink-stats", response_model=FreeDrinkStatsResponse)
async def get_free_drink_stats(payload: FreeDrinkStatsRequest) -> FreeDrinkStatsResponse:
    now_utc = datetime.now(timezone.utc)
    try:
        stats = await AvailabilityService.get_free_drink_stats(
            venue_id=payload.venue_id,
            now_utc=now_utc,
        )
    except VenueNotFoundError as exc:
        raise HTTPException(
            status_code=404,
            detail=error_detail("VENUE_NOT_FOUND", "Venue not found"),
        ) from exc

    return _as_response(stats)
