from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime

from app.economy.availability.types import AvailabilityResult, UnavailableReason, VenueSnapshot
from app.economy.caps.rules import compute_cap_status
from app.economy.caps.types import CapStatus, CapUsage, OnExhaust
from app.economy.schedule.rules import find_active, next_occurrence
from app.economy.schedule.types import ScheduleWindow

ExhaustHandler = Callable[[VenueSnapshot, ScheduleWindow, CapStatus], AvailabilityResult]


def _close(venue: VenueSnapshot, window: ScheduleWindow, cap_status: CapStatus) -> AvailabilityResult:
    return AvailabilityResult(
        is_available=False,
        active_window=window,
        next_window=None,
        cap_status=cap_status,
        reason=UnavailableReason.CAP_EXHAUSTED,
    )


def _show_alt_offer(
    venue: VenueSnapshot, window: ScheduleWindow, cap_status: CapStatus
) -> AvailabilityResult:
    return AvailabilityResult(
        is_available=False,
        active_window=window,
        next_window=None,
        cap_status=cap_status,
        reason=UnavailableReason.CAP_EXHAUSTED,
        alt_offer_text=venue.caps.alt_offer_text,
    )


def _do_nothing(
    venue: VenueSnapshot, window: ScheduleWindow, cap_status: CapStatus
) -> AvailabilityResult:
    # soft cap: exhaustion only shows on dashboards
    return AvailabilityResult(
        is_available=True,
        active_window=window,
        next_window=None,
        cap_status=cap_status,
    )


ON_EXHAUST_HANDLERS: dict[OnExhaust, ExhaustHandler] = {
    OnExhaust.CLOSE: _close,
    OnExhaust.SHOW_ALT_OFFER: _show_alt_offer,
    OnExhaust.DO_NOTHING: _do_nothing,
}


def evaluate(
    *,
    venue: VenueSnapshot,
    windows: Sequence[ScheduleWindow],
    usage: CapUsage,
    now_utc: datetime,
    warn_pct: float,
    critical_pct: float,
) -> AvailabilityResult:
    """Decides whether a free drink governed by ``windows`` is redeemable now."""
    if venue.is_paused:
        return AvailabilityResult(
            is_available=False,
            active_window=None,
            next_window=None,
            cap_status=None,
            reason=UnavailableReason.VENUE_PAUSED,
        )

    active_window = find_active(windows, now_utc)
    if active_window is None:
        return AvailabilityResult(
            is_available=False,
            active_window=None,
            next_window=next_occurrence(windows, now_utc),
            cap_status=None,
            reason=UnavailableReason.NO_ACTIVE_WINDOW,
        )

    cap_status = compute_cap_status(
        venue.caps,
        usage,
        warn_pct=warn_pct,
        critical_pct=critical_pct,
    )
    if cap_status.is_exhausted:
        return ON_EXHAUST_HANDLERS[venue.caps.on_exhaust](venue, active_window, cap_status)

    return AvailabilityResult(
        is_available=True,
        active_window=active_window,
        next_window=None,
        cap_status=cap_status,
    )
