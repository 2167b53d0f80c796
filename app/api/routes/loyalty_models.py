from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from app.economy.loyalty.types import RewardType


class DetectMilestonesRequest(BaseModel):
    user_id: UUID | None = None
    venue_id: UUID | None = None


class MilestoneResponse(BaseModel):
    id: UUID
    user_id: UUID
    venue_id: UUID
    milestone_type: str
    visit_count: int
    total_spend: Decimal
    achieved_at: datetime
    admin_notified: bool


class DetectMilestonesResponse(BaseModel):
    success: bool
    new_milestones: list[MilestoneResponse]


class PendingAlertResponse(BaseModel):
    id: UUID
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


class PendingAlertsSummaryResponse(BaseModel):
    pending_count: int = Field(ge=0)
    today_total: int = Field(ge=0)
    by_type: dict[str, int]


class PendingAlertsResponse(BaseModel):
    pending_milestones: list[PendingAlertResponse]
    summary: PendingAlertsSummaryResponse


class DismissMilestoneResponse(BaseModel):
    success: bool
    action: str = "dismissed"


class SendRewardRequest(BaseModel):
    reward_type: RewardType
    points_amount: int | None = Field(default=None, gt=0, le=10_000)
    message: str | None = Field(default=None, max_length=500)


class RewardResponse(BaseModel):
    type: RewardType
    label: str
    user_name: str | None = None
    venue_name: str | None = None


class SendRewardResponse(BaseModel):
    success: bool
    action: str = "reward_sent"
    reward: RewardResponse
