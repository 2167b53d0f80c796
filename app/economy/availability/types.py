from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from app.economy.caps.types import Caps, CapStatus
from app.economy.schedule.types import DayGroup, ScheduleWindow


class UnavailableReason(str, Enum):
    VENUE_PAUSED = "VENUE_PAUSED"
    NO_ACTIVE_WINDOW = "NO_ACTIVE_WINDOW"
    CAP_EXHAUSTED = "CAP_EXHAUSTED"


@dataclass(frozen=True, slots=True)
class VenueSnapshot:
    venue_id: UUID
    is_paused: bool
    caps: Caps
    timezone: str


@dataclass(frozen=True, slots=True)
class AvailabilityResult:
    is_available: bool
    active_window: ScheduleWindow | None
    next_window: ScheduleWindow | None
    cap_status: CapStatus | None
    reason: UnavailableReason | None = None
    alt_offer_text: str | None = None


@dataclass(frozen=True, slots=True)
class FreeDrinkView:
    id: UUID
    name: str
    image_url: str | None
    category: str | None
    windows: tuple[ScheduleWindow, ...]


@dataclass(frozen=True, slots=True)
class FreeDrinkStats:
    venue_id: UUID
    today_redemptions: int
    cap_usage_pct: float
    cap_status_label: str
    active_free_drinks: tuple[FreeDrinkView, ...]
    current_active_window: ScheduleWindow | None
    next_window: ScheduleWindow | None
    caps: Caps
    is_active_now: bool
    is_paused: bool
    opening_hours: tuple[DayGroup, ...] = ()
    is_venue_open: bool = False
