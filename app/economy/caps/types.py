from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OnExhaust(str, Enum):
    CLOSE = "close"
    SHOW_ALT_OFFER = "show_alt_offer"
    DO_NOTHING = "do_nothing"


class ExhaustReason(str, Enum):
    DAILY = "DAILY"
    HOURLY = "HOURLY"
    PER_USER_DAILY = "PER_USER_DAILY"


@dataclass(frozen=True, slots=True)
class Caps:
    daily: int = 0
    hourly: int = 0
    per_user_daily: int = 1
    on_exhaust: OnExhaust = OnExhaust.CLOSE
    alt_offer_text: str | None = None

    def as_payload(self) -> dict[str, object]:
        return {
            "daily": self.daily,
            "hourly": self.hourly,
            "perUserDaily": self.per_user_daily,
            "onExhaust": self.on_exhaust.value,
            "altOfferText": self.alt_offer_text,
        }


@dataclass(frozen=True, slots=True)
class CapUsage:
    used_today: int
    used_this_hour: int = 0
    used_by_user_today: int = 0


@dataclass(frozen=True, slots=True)
class CapStatus:
    usage_pct: float
    is_exhausted: bool
    exhausted_reason: ExhaustReason | None
    label: str
