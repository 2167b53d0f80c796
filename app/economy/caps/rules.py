from __future__ import annotations

from collections.abc import Mapping

from app.economy.caps.constants import (
    DEFAULT_ON_EXHAUST,
    DEFAULT_PER_USER_DAILY,
    FULL_USAGE_PCT,
    STATUS_LABEL_AVAILABLE,
    STATUS_LABEL_CRITICAL,
    STATUS_LABEL_EXHAUSTED,
    STATUS_LABEL_WARNING,
)
from app.economy.caps.types import Caps, CapStatus, CapUsage, ExhaustReason, OnExhaust


def _non_negative_int(value: object, *, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return max(0, parsed)


def parse_caps(raw: Mapping[str, object] | None) -> Caps:
    """Builds Caps from the venue JSON blob.

    Missing config yields ``{daily: 0, perUserDaily: 1, onExhaust: close}``.
    The legacy ``perUser`` key is read when ``perUserDaily`` is absent.
    """
    if not raw:
        return Caps()

    per_user_raw = raw.get("perUserDaily")
    if per_user_raw is None:
        per_user_raw = raw.get("perUser")

    on_exhaust_raw = raw.get("onExhaust")
    try:
        on_exhaust = OnExhaust(on_exhaust_raw) if on_exhaust_raw else DEFAULT_ON_EXHAUST
    except ValueError:
        on_exhaust = DEFAULT_ON_EXHAUST

    alt_offer_text = raw.get("altOfferText")
    return Caps(
        daily=_non_negative_int(raw.get("daily"), default=0),
        hourly=_non_negative_int(raw.get("hourly"), default=0),
        per_user_daily=_non_negative_int(per_user_raw, default=DEFAULT_PER_USER_DAILY),
        on_exhaust=on_exhaust,
        alt_offer_text=alt_offer_text if isinstance(alt_offer_text, str) else None,
    )


def usage_pct(*, used_today: int, daily: int) -> float:
    if daily <= 0:
        return 0.0
    return min(max(used_today / daily * 100, 0.0), FULL_USAGE_PCT)


def status_label(pct: float, *, warn_pct: float, critical_pct: float) -> str:
    if pct >= FULL_USAGE_PCT:
        return STATUS_LABEL_EXHAUSTED
    if pct >= critical_pct:
        return STATUS_LABEL_CRITICAL
    if pct >= warn_pct:
        return STATUS_LABEL_WARNING
    return STATUS_LABEL_AVAILABLE


def exhausted_reason(caps: Caps, usage: CapUsage) -> ExhaustReason | None:
    if caps.daily > 0 and usage.used_today >= caps.daily:
        return ExhaustReason.DAILY
    if caps.hourly > 0 and usage.used_this_hour >= caps.hourly:
        return ExhaustReason.HOURLY
    if caps.per_user_daily > 0 and usage.used_by_user_today >= caps.per_user_daily:
        return ExhaustReason.PER_USER_DAILY
    return None


def compute_cap_status(
    caps: Caps,
    usage: CapUsage,
    *,
    warn_pct: float,
    critical_pct: float,
) -> CapStatus:
    pct = usage_pct(used_today=usage.used_today, daily=caps.daily)
    reason = exhausted_reason(caps, usage)
    return CapStatus(
        usage_pct=pct,
        is_exhausted=reason is not None,
        exhausted_reason=reason,
        label=status_label(pct, warn_pct=warn_pct, critical_pct=critical_pct),
    )
