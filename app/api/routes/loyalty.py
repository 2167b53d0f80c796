from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, HTTPException, Request

from app.core.config import get_settings
from app.economy.loyalty.errors import MilestoneNotFoundError, MilestoneRewardAlreadySentError
from app.economy.loyalty.service import LoyaltyService

from .access import assert_admin, assert_internal_access, error_detail, resolve_actor
from .loyalty_models import (
    DetectMilestonesRequest,
    DetectMilestonesResponse,
    DismissMilestoneResponse,
    MilestoneResponse,
    PendingAlertResponse,
    PendingAlertsResponse,
    PendingAlertsSummaryResponse,
    RewardResponse,
    SendRewardRequest,
    SendRewardResponse,
)

router = APIRouter(tags=["loyalty"])


@router.post("/detect-milestones", response_model=DetectMilestonesResponse)
async def detect_milestones(
    payload: DetectMilestonesRequest,
    request: Request,
) -> DetectMilestonesResponse:
    assert_internal_access(request, settings=get_settings())

    recorded = await LoyaltyService.scan_recent(
        now_utc=datetime.now(timezone.utc),
        user_id=payload.user_id,
        venue_id=payload.venue_id,
    )
    return DetectMilestonesResponse(
        success=True,
        new_milestones=[
            MilestoneResponse(
                id=milestone.milestone_id,
                user_id=milestone.user_id,
                venue_id=milestone.venue_id,
                milestone_type=milestone.milestone_type.value,
                visit_count=milestone.visit_count,
                total_spend=milestone.total_spend,
                achieved_at=milestone.achieved_at,
                admin_notified=milestone.admin_notified,
            )
            for milestone in recorded
        ],
    )


@router.get("/loyalty/pending-alerts", response_model=PendingAlertsResponse)
async def get_pending_alerts(request: Request) -> PendingAlertsResponse:
    assert_admin(await resolve_actor(request))

    alerts, summary = await LoyaltyService.pending_alerts(now_utc=datetime.now(timezone.utc))
    return PendingAlertsResponse(
        pending_milestones=[
            PendingAlertResponse(
                id=alert.milestone_id,
                user_id=alert.user_id,
                venue_id=alert.venue_id,
                user_name=alert.user_name,
                venue_name=alert.venue_name,
                milestone_type=alert.milestone_type,
                milestone_label=alert.milestone_label,
                suggested_reward=alert.suggested_reward,
                visit_count=alert.visit_count,
                total_spend=alert.total_spend,
                achieved_at=alert.achieved_at,
                reward_sent=alert.reward_sent,
            )
            for alert in alerts
        ],
        summary=PendingAlertsSummaryResponse(
            pending_count=summary.pending_count,
            today_total=summary.today_total,
            by_type=summary.by_type,
        ),
    )


@router.post("/loyalty/milestones/{milestone_id}/dismiss", response_model=DismissMilestoneResponse)
async def dismiss_milestone(milestone_id: UUID, request: Request) -> DismissMilestoneResponse:
    assert_admin(await resolve_actor(request))

    try:
        await LoyaltyService.dismiss(milestone_id=milestone_id)
    except MilestoneNotFoundError as exc:
        raise HTTPException(
            status_code=404,
            detail=error_detail("MILESTONE_NOT_FOUND", "Milestone not found"),
        ) from exc

    return DismissMilestoneResponse(success=True)


@router.post("/loyalty/milestones/{milestone_id}/reward", response_model=SendRewardResponse)
async def send_milestone_reward(
    milestone_id: UUID,
    payload: SendRewardRequest,
    request: Request,
) -> SendRewardResponse:
    assert_admin(await resolve_actor(request))

    try:
        result = await LoyaltyService.send_reward(
            milestone_id=milestone_id,
            reward_type=payload.reward_type,
            points_amount=payload.points_amount,
            message=payload.message,
            now_utc=datetime.now(timezone.utc),
        )
    except MilestoneNotFoundError as exc:
        raise HTTPException(
            status_code=404,
            detail=error_detail("MILESTONE_NOT_FOUND", "Milestone not found"),
        ) from exc
    except MilestoneRewardAlreadySentError as exc:
        raise HTTPException(
            status_code=409,
            detail=error_detail("REWARD_ALREADY_SENT", "Reward already sent"),
        ) from exc

    return SendRewardResponse(
        success=True,
        reward=RewardResponse(
            type=result.reward_type,
            label=result.label,
            user_name=result.user_name,
            venue_name=result.venue_name,
        ),
    )
