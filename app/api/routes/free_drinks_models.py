from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field


class FreeDrinkStatsRequest(BaseModel):
    venue_id: UUID


class ScheduleWindowResponse(BaseModel):
    id: UUID
    drink_id: UUID | None = None
    days: list[int]
    start_time: str
    end_time: str
    timezone: str


class CapsResponse(BaseModel):
    daily: int = Field(ge=0)
    hourly: int = Field(ge=0)
    per_user_daily: int = Field(ge=0, serialization_alias="perUserDaily")
    on_exhaust: str = Field(serialization_alias="onExhaust")
    alt_offer_text: str | None = Field(default=None, serialization_alias="altOfferText")


class OpeningHoursGroupResponse(BaseModel):
    days: list[int]
    label: str
    open: str | None = None
    close: str | None = None
    closed: bool


class FreeDrinkResponse(BaseModel):
    id: UUID
    name: str
    image_url: str | None = None
    category: str | None = None
    windows: list[ScheduleWindowResponse]


class FreeDrinkStatsResponse(BaseModel):
    today_redemptions: int = Field(ge=0)
    cap_usage_pct: float = Field(ge=0.0, le=100.0)
    cap_status: str
    active_free_drinks: list[FreeDrinkResponse]
    current_active_window: ScheduleWindowResponse | None = None
    next_window: ScheduleWindowResponse | None = None
    caps: CapsResponse
    is_active_now: bool
    is_paused: bool
    opening_hours: list[OpeningHoursGroupResponse] = Field(default_factory=list)
    is_venue_open: bool = False
