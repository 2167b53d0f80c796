from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class MilestoneType(str, Enum):
    FIRST_VISIT = "first_visit"
    RETURNING = "returning"
    WEEKLY_REGULAR = "weekly_regular"
    MONTHLY_VIP = "monthly_vip"
    PLATINUM = "platinum"
    LEGENDARY = "legendary"


class RewardType(str, Enum):
    FREE_DRINK = "free_drink"
    FREE_DESSERT = "free_dessert"
    BONUS_POINTS = "bonus_points"
    DISCOUNT_COUPON = "discount_coupon"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class VisitStats:
    visits_today: int
    visits_this_week: int
    visits_this_month: int
    visits_total: int
    total_spend: Decimal


@dataclass(frozen=True, slots=True)
class MilestoneDefinition:
    milestone_type: MilestoneType
    label: str
    suggested_reward: str
    notify_admin: bool
    condition: Callable[[VisitStats], bool]


@dataclass(frozen=True, slots=True)
class DetectedMilestone:
    milestone_type: MilestoneType
    visit_count: int
    total_spend: Decimal
    admin_notified: bool


@dataclass(frozen=True, slots=True)
class RecordedMilestone:
    milestone_id: UUID
    user_id: UUID
    venue_id: UUID
    milestone_type: MilestoneType
    visit_count: int
    total_spend: Decimal
    achieved_at: datetime
    admin_notified: bool


@dataclass(frozen=True, slots=True)
class PendingAlert:
    milestone_id: UUID
    user_id: UUID
    venue_id: UUID
    user_name: str
    venue_name: str
    milestone_type: str
    milestone_label: str
    suggested_reward: str
    visit_count: int
    total_spend: Decimal
    achieved_at: datetime
    reward_sent: bool


@dataclass(frozen=True, slots=True)
class PendingAlertsSummary:
    pending_count: int
    today_total: int
    by_type: dict[str, int]


@dataclass(frozen=True, slots=True)
class RewardResult:
    milestone_id: UUID
    reward_type: RewardType
    label: str
    user_name: str | None
    venue_name: str | None
