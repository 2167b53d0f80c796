from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class QrTokenIssueRequest(BaseModel):
    user_id: UUID


class QrTokenIssueResponse(BaseModel):
    token: str
    expires_at: datetime
    expires_in_seconds: int = Field(gt=0)


class ValidateQrRequest(BaseModel):
    token: str = Field(min_length=1, max_length=256)
    venue_id: UUID | None = None


class ValidateQrResponse(BaseModel):
    valid: bool
    user_id: UUID
    user_name: str
    points_balance: int
    validated_at: datetime


class VoidRedemptionRequest(BaseModel):
    redemption_id: UUID
    reason: str | None = Field(default=None, max_length=500)


class VoidRedemptionResponse(BaseModel):
    success: bool
    redemption_id: UUID
    voided_at: datetime


class ConfirmRedemptionRequest(BaseModel):
    venue_id: UUID
    user_id: UUID
    token: str = Field(min_length=1, max_length=256)
    drink_id: UUID | None = None
    value: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)


class ConfirmRedemptionResponse(BaseModel):
    redemption_id: UUID
    user_id: UUID
    venue_id: UUID
    drink: str
    value: Decimal
    redeemed_at: datetime
    status: str
