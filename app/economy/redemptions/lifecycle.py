from __future__ import annotations

from app.economy.redemptions.constants import ALLOWED_TRANSITIONS
from app.economy.redemptions.errors import RedemptionInvalidStateError
from app.economy.redemptions.types import RedemptionStatus


def parse_status(raw_status: str) -> RedemptionStatus:
    try:
        return RedemptionStatus(raw_status)
    except ValueError as exc:
        raise RedemptionInvalidStateError(f"Unknown redemption status: {raw_status}") from exc


def ensure_transition(current: RedemptionStatus, target: RedemptionStatus) -> None:
    if target not in ALLOWED_TRANSITIONS[current]:
        raise RedemptionInvalidStateError(
            f"Cannot move redemption from {current.value} to {target.value}"
        )
