from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal

from app.economy.caps.time import local_day_start_utc, local_month_start_utc, local_week_start_utc
from app.economy.loyalty.constants import MILESTONE_DEFINITIONS
from app.economy.loyalty.types import DetectedMilestone, VisitStats


def compute_visit_stats(
    history: Iterable[tuple[datetime, Decimal | None]],
    *,
    now_utc: datetime,
    timezone_name: str,
) -> VisitStats:
    """Aggregates a pair's successful redemptions over venue-local periods.

    Weeks start on Monday.
    """
    today_start = local_day_start_utc(now_utc, timezone_name)
    week_start = local_week_start_utc(now_utc, timezone_name)
    month_start = local_month_start_utc(now_utc, timezone_name)

    visits_today = 0
    visits_this_week = 0
    visits_this_month = 0
    visits_total = 0
    total_spend = Decimal("0")
    for redeemed_at, value in history:
        visits_total += 1
        total_spend += value or Decimal("0")
        if redeemed_at >= today_start:
            visits_today += 1
        if redeemed_at >= week_start:
            visits_this_week += 1
        if redeemed_at >= month_start:
            visits_this_month += 1

    return VisitStats(
        visits_today=visits_today,
        visits_this_week=visits_this_week,
        visits_this_month=visits_this_month,
        visits_total=visits_total,
        total_spend=total_spend,
    )


def detect_new_milestones(
    stats: VisitStats,
    existing_types: Iterable[str],
) -> list[DetectedMilestone]:
    existing = set(existing_types)
    detected: list[DetectedMilestone] = []
    for definition in MILESTONE_DEFINITIONS:
        if definition.milestone_type.value in existing:
            continue
        if not definition.condition(stats):
            continue
        detected.append(
            DetectedMilestone(
                milestone_type=definition.milestone_type,
                visit_count=stats.visits_total,
                total_spend=stats.total_spend,
                # milestones without admin attention never enter the pending queue
                admin_notified=not definition.notify_admin,
            )
        )
    return detected
