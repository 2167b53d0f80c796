from __future__ import annotations

from datetime import datetime, timedelta
from uuid import UUID

from app.economy.redemptions.constants import VOID_POLICY_BY_ROLE
from app.economy.redemptions.errors import RedemptionForbiddenError
from app.economy.redemptions.types import Actor


def authorize_void(
    actor: Actor,
    *,
    venue_id: UUID,
    redeemed_at: datetime,
    now_utc: datetime,
    staff_window: timedelta,
) -> None:
    if actor.role is None:
        raise RedemptionForbiddenError("Only venue staff or admins can void redemptions")

    policy = VOID_POLICY_BY_ROLE[actor.role]
    if policy.venue_scoped and venue_id not in actor.venue_ids:
        raise RedemptionForbiddenError("Redemption belongs to another venue")
    if policy.time_limited and now_utc - redeemed_at > staff_window:
        raise RedemptionForbiddenError("Staff void window expired")
