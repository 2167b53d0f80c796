from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.repo.milestones_repo import MilestonesRepo
from app.db.repo.profiles_repo import ProfilesRepo
from app.db.repo.redemptions_repo import RedemptionsRepo
from app.db.repo.venues_repo import VenuesRepo
from app.db.session import SessionLocal
from app.economy.caps.time import local_day_start_utc
from app.economy.loyalty.constants import (
    DEFAULT_BONUS_POINTS,
    DEFAULT_SCAN_LOOKBACK,
    MILESTONE_DEFINITIONS_BY_TYPE,
    PENDING_ALERTS_LIMIT,
    REWARD_LABELS,
    UNKNOWN_NAME,
)
from app.economy.loyalty.errors import MilestoneNotFoundError, MilestoneRewardAlreadySentError
from app.economy.loyalty.rules import compute_visit_stats, detect_new_milestones
from app.economy.loyalty.types import (
    PendingAlert,
    PendingAlertsSummary,
    RecordedMilestone,
    RewardResult,
    RewardType,
)
from app.services.notifications import AUDIENCE_ADMIN, AUDIENCE_USER, send_notification

logger = structlog.get_logger(__name__)


def reward_label(reward_type: RewardType, *, points_amount: int | None, message: str | None) -> str:
    if reward_type == RewardType.BONUS_POINTS:
        return REWARD_LABELS[reward_type].format(points=points_amount or DEFAULT_BONUS_POINTS)
    if reward_type == RewardType.CUSTOM and message:
        return message
    return REWARD_LABELS[reward_type]


class LoyaltyService:
    @staticmethod
    async def _detect_for_pair(
        session: AsyncSession,
        *,
        user_id: UUID,
        venue_id: UUID,
        now_utc: datetime,
    ) -> list[RecordedMilestone]:
        venue = await VenuesRepo.get_by_id(session, venue_id)
        timezone_name = (
            venue.timezone if venue is not None and venue.timezone else get_settings().default_venue_timezone
        )
        history = await RedemptionsRepo.list_success_history(
            session,
            user_id=user_id,
            venue_id=venue_id,
        )
        stats = compute_visit_stats(history, now_utc=now_utc, timezone_name=timezone_name)
        existing_types = await MilestonesRepo.list_types_for_pair(
            session,
            user_id=user_id,
            venue_id=venue_id,
        )

        recorded: list[RecordedMilestone] = []
        for detected in detect_new_milestones(stats, existing_types):
            milestone_id = uuid4()
            inserted = await MilestonesRepo.insert_if_absent(
                session,
                milestone_id=milestone_id,
                user_id=user_id,
                venue_id=venue_id,
                milestone_type=detected.milestone_type.value,
                visit_count=detected.visit_count,
                total_spend=detected.total_spend,
                achieved_at=now_utc,
                admin_notified=detected.admin_notified,
            )
            if not inserted:
                continue
            recorded.append(
                RecordedMilestone(
                    milestone_id=milestone_id,
                    user_id=user_id,
                    venue_id=venue_id,
                    milestone_type=detected.milestone_type,
                    visit_count=detected.visit_count,
                    total_spend=detected.total_spend,
                    achieved_at=now_utc,
                    admin_notified=detected.admin_notified,
                )
            )
        return recorded

    @staticmethod
    async def _notify_admins(recorded: list[RecordedMilestone]) -> None:
        for milestone in recorded:
            if milestone.admin_notified:
                continue
            definition = MILESTONE_DEFINITIONS_BY_TYPE[milestone.milestone_type.value]
            await send_notification(
                event="loyalty_milestone_reached",
                audience=AUDIENCE_ADMIN,
                payload={
                    "milestone_id": str(milestone.milestone_id),
                    "user_id": str(milestone.user_id),
                    "venue_id": str(milestone.venue_id),
                    "milestone_type": milestone.milestone_type.value,
                    "milestone_label": definition.label,
                    "suggested_reward": definition.suggested_reward,
                    "visit_count": milestone.visit_count,
                },
            )

    @staticmethod
    async def on_redemption_success(
        *,
        user_id: UUID,
        venue_id: UUID,
        now_utc: datetime,
    ) -> list[RecordedMilestone]:
        async with SessionLocal.begin() as session:
            recorded = await LoyaltyService._detect_for_pair(
                session,
                user_id=user_id,
                venue_id=venue_id,
                now_utc=now_utc,
            )

        if recorded:
            logger.info(
                "loyalty_milestones_detected",
                user_id=str(user_id),
                venue_id=str(venue_id),
                milestone_types=[milestone.milestone_type.value for milestone in recorded],
            )
        await LoyaltyService._notify_admins(recorded)
        return recorded

    @staticmethod
    async def scan_recent(
        *,
        now_utc: datetime,
        since_utc: datetime | None = None,
        user_id: UUID | None = None,
        venue_id: UUID | None = None,
    ) -> list[RecordedMilestone]:
        """Re-runs detection for pairs with successful redemptions since ``since_utc``.

        Defaults to a trailing 24 hour window, which covers the current local day
        of every venue whatever its timezone. When both
        ``user_id`` and ``venue_id`` are given only that pair is checked.
        """
        if user_id is not None and venue_id is not None:
            pairs = [(user_id, venue_id)]
        else:
            if since_utc is None:
                since_utc = now_utc - DEFAULT_SCAN_LOOKBACK
            async with SessionLocal.begin() as session:
                pairs = await RedemptionsRepo.list_success_pairs_since(
                    session,
                    since_utc=since_utc,
                    user_id=user_id,
                    venue_id=venue_id,
                )

        recorded: list[RecordedMilestone] = []
        for pair_user_id, pair_venue_id in pairs:
            async with SessionLocal.begin() as session:
                recorded.extend(
                    await LoyaltyService._detect_for_pair(
                        session,
                        user_id=pair_user_id,
                        venue_id=pair_venue_id,
                        now_utc=now_utc,
                    )
                )

        logger.info(
            "loyalty_milestone_scan_finished",
            pairs_checked=len(pairs),
            milestones_created=len(recorded),
        )
        await LoyaltyService._notify_admins(recorded)
        return recorded

    @staticmethod
    async def pending_alerts(*, now_utc: datetime) -> tuple[list[PendingAlert], PendingAlertsSummary]:
        async with SessionLocal.begin() as session:
            milestones = await MilestonesRepo.list_pending_alerts(
                session,
                limit=PENDING_ALERTS_LIMIT,
            )
            user_names = await ProfilesRepo.get_names(
                session, (milestone.user_id for milestone in milestones)
            )
            venue_names = await VenuesRepo.get_names(
                session, (milestone.venue_id for milestone in milestones)
            )
            today_total = await MilestonesRepo.count_achieved_since(
                session,
                since_utc=local_day_start_utc(now_utc, get_settings().default_venue_timezone),
            )

        alerts: list[PendingAlert] = []
        by_type: dict[str, int] = {}
        for milestone in milestones:
            definition = MILESTONE_DEFINITIONS_BY_TYPE.get(milestone.milestone_type)
            alerts.append(
                PendingAlert(
                    milestone_id=milestone.id,
                    user_id=milestone.user_id,
                    venue_id=milestone.venue_id,
                    user_name=user_names.get(milestone.user_id, UNKNOWN_NAME),
                    venue_name=venue_names.get(milestone.venue_id, UNKNOWN_NAME),
                    milestone_type=milestone.milestone_type,
                    milestone_label=(
                        definition.label if definition is not None else milestone.milestone_type
                    ),
                    suggested_reward=(
                        definition.suggested_reward if definition is not None else "bonus_points"
                    ),
                    visit_count=milestone.visit_count,
                    total_spend=milestone.total_spend,
                    achieved_at=milestone.achieved_at,
                    reward_sent=milestone.reward_sent,
                )
            )
            by_type[milestone.milestone_type] = by_type.get(milestone.milestone_type, 0) + 1

        return alerts, PendingAlertsSummary(
            pending_count=len(alerts),
            today_total=today_total,
            by_type=by_type,
        )

    @staticmethod
    async def dismiss(*, milestone_id: UUID) -> None:
        async with SessionLocal.begin() as session:
            dismissed = await MilestonesRepo.mark_dismissed(session, milestone_id=milestone_id)
        if not dismissed:
            raise MilestoneNotFoundError
        logger.info("loyalty_milestone_dismissed", milestone_id=str(milestone_id))

    @staticmethod
    async def send_reward(
        *,
        milestone_id: UUID,
        reward_type: RewardType,
        points_amount: int | None,
        message: str | None,
        now_utc: datetime,
    ) -> RewardResult:
        label = reward_label(reward_type, points_amount=points_amount, message=message)
        async with SessionLocal.begin() as session:
            milestone = await MilestonesRepo.get_by_id_for_update(session, milestone_id)
            if milestone is None:
                raise MilestoneNotFoundError
            if milestone.reward_sent:
                raise MilestoneRewardAlreadySentError

            if reward_type == RewardType.BONUS_POINTS and points_amount:
                await ProfilesRepo.add_points(
                    session,
                    user_id=milestone.user_id,
                    amount=points_amount,
                    now_utc=now_utc,
                )
            await MilestonesRepo.mark_reward_sent(
                session,
                milestone_id=milestone_id,
                reward_type=reward_type.value,
                reward_message=message,
                sent_at=now_utc,
            )
            user_names = await ProfilesRepo.get_names(session, [milestone.user_id])
            venue_names = await VenuesRepo.get_names(session, [milestone.venue_id])
            user_id = milestone.user_id
            venue_id = milestone.venue_id
            milestone_type = milestone.milestone_type

        venue_name = venue_names.get(venue_id)
        await send_notification(
            event="loyalty_reward_sent",
            audience=AUDIENCE_USER,
            payload={
                "user_id": str(user_id),
                "title": "🎉 Lojalitás jutalom!",
                "body": message
                or f"Köszönjük a hűségedet a {venue_name or 'helyszínen'}! Jutalmad: {label}",
                "milestone_id": str(milestone_id),
                "milestone_type": milestone_type,
                "reward_type": reward_type.value,
                "venue_id": str(venue_id),
            },
        )
        logger.info(
            "loyalty_reward_sent",
            milestone_id=str(milestone_id),
            reward_type=reward_type.value,
        )
        return RewardResult(
            milestone_id=milestone_id,
            reward_type=reward_type,
            label=label,
            user_name=user_names.get(user_id),
            venue_name=venue_name,
        )
