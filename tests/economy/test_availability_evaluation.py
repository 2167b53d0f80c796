from __future__ import annotations

from datetime import datetime, timezone

from app.economy.availability.evaluation import ON_EXHAUST_HANDLERS, evaluate
from app.economy.availability.types import UnavailableReason, VenueSnapshot
from app.economy.caps.types import Caps, CapUsage, ExhaustReason, OnExhaust
from tests.economy.schedule_fixtures import VENUE_ID, make_window

# Monday 2024-01-15 14:30 Budapest
MONDAY_1430_LOCAL = datetime(2024, 1, 15, 13, 30, tzinfo=timezone.utc)
MONDAY_1700_LOCAL = datetime(2024, 1, 15, 16, 0, tzinfo=timezone.utc)


def _venue(caps: Caps, *, is_paused: bool = False) -> VenueSnapshot:
    return VenueSnapshot(venue_id=VENUE_ID, is_paused=is_paused, caps=caps, timezone="Europe/Budapest")


def _evaluate(venue: VenueSnapshot, usage: CapUsage, now_utc: datetime = MONDAY_1430_LOCAL):
    windows = [make_window(days={1, 2, 3, 4, 5}, start_time="14:00", end_time="16:00")]
    return evaluate(
        venue=venue,
        windows=windows,
        usage=usage,
        now_utc=now_utc,
        warn_pct=70.0,
        critical_pct=90.0,
    )


def test_every_exhaust_behavior_has_a_handler() -> None:
    assert set(ON_EXHAUST_HANDLERS) == set(OnExhaust)


def test_available_inside_window_with_remaining_cap() -> None:
    result = _evaluate(_venue(Caps(daily=10)), CapUsage(used_today=3))

    assert result.is_available is True
    assert result.reason is None
    assert result.active_window is not None
    assert result.cap_status is not None
    assert result.cap_status.usage_pct == 30.0


def test_daily_cap_exhausted_closes_free_drink() -> None:
    result = _evaluate(_venue(Caps(daily=2, on_exhaust=OnExhaust.CLOSE)), CapUsage(used_today=2))

    assert result.is_available is False
    assert result.reason == UnavailableReason.CAP_EXHAUSTED
    assert result.cap_status is not None
    assert result.cap_status.usage_pct == 100.0
    assert result.cap_status.exhausted_reason == ExhaustReason.DAILY
    assert result.alt_offer_text is None


def test_show_alt_offer_returns_alternative_text() -> None:
    caps = Caps(daily=2, on_exhaust=OnExhaust.SHOW_ALT_OFFER, alt_offer_text="2 for 1 cocktails")
    result = _evaluate(_venue(caps), CapUsage(used_today=2))

    assert result.is_available is False
    assert result.reason == UnavailableReason.CAP_EXHAUSTED
    assert result.alt_offer_text == "2 for 1 cocktails"


def test_do_nothing_keeps_drink_available_after_exhaustion() -> None:
    caps = Caps(daily=2, on_exhaust=OnExhaust.DO_NOTHING)
    result = _evaluate(_venue(caps), CapUsage(used_today=5))

    assert result.is_available is True
    assert result.cap_status is not None
    assert result.cap_status.is_exhausted is True
    assert result.cap_status.usage_pct == 100.0


def test_per_user_limit_blocks_second_drink() -> None:
    result = _evaluate(
        _venue(Caps(daily=100, per_user_daily=1)),
        CapUsage(used_today=10, used_by_user_today=1),
    )

    assert result.is_available is False
    assert result.cap_status is not None
    assert result.cap_status.exhausted_reason == ExhaustReason.PER_USER_DAILY


def test_paused_venue_is_never_available() -> None:
    result = _evaluate(_venue(Caps(daily=10), is_paused=True), CapUsage(used_today=0))

    assert result.is_available is False
    assert result.reason == UnavailableReason.VENUE_PAUSED
    assert result.active_window is None


def test_outside_window_reports_next_window() -> None:
    result = _evaluate(_venue(Caps(daily=10)), CapUsage(used_today=0), now_utc=MONDAY_1700_LOCAL)

    assert result.is_available is False
    assert result.reason == UnavailableReason.NO_ACTIVE_WINDOW
    assert result.next_window is not None
    assert result.next_window.days == frozenset({1, 2, 3, 4, 5})
    assert result.cap_status is None


def test_unlimited_caps_never_exhaust() -> None:
    caps = Caps(daily=0, hourly=0, per_user_daily=0)
    result = _evaluate(_venue(caps), CapUsage(used_today=1000, used_this_hour=100, used_by_user_today=9))

    assert result.is_available is True
    assert result.cap_status is not None
    assert result.cap_status.usage_pct == 0.0
