from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from uuid import UUID, uuid4

import structlog
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.db.models.redemptions import Redemption
from app.db.repo.qr_tokens_repo import QrTokensRepo
from app.db.repo.redemptions_repo import RedemptionsRepo
from app.db.repo.venues_repo import VenuesRepo
from app.db.session import SessionLocal
from app.economy.availability.service import AvailabilityService
from app.economy.loyalty.service import LoyaltyService
from app.economy.redemptions.authorization import authorize_void
from app.economy.redemptions.constants import DEFAULT_DRINK_LABEL
from app.economy.redemptions.errors import (
    RedemptionNotAvailableError,
    RedemptionNotFoundError,
    RedemptionValidationError,
    TokenAlreadyUsedError,
)
from app.economy.redemptions.lifecycle import ensure_transition, parse_status
from app.economy.redemptions.metadata import merge_void_metadata
from app.economy.redemptions.rate_limit import enforce_void_rate_limit
from app.economy.redemptions.tokens import (
    ExpiredTokenFound,
    claim_consumed_token,
    issue_token,
    validate_and_consume_token,
)
from app.economy.redemptions.types import (
    Actor,
    ConfirmedRedemption,
    IssuedQrToken,
    RedemptionStatus,
    TokenValidationResult,
    VoidResult,
)
from app.services.qr_tokens import hash_qr_token

logger = structlog.get_logger(__name__)


class RedemptionService:
    @staticmethod
    async def issue_qr_token(*, user_id: UUID, now_utc: datetime) -> IssuedQrToken:
        settings = get_settings()
        async with SessionLocal.begin() as session:
            issued = await issue_token(
                session,
                user_id=user_id,
                now_utc=now_utc,
                ttl_seconds=settings.qr_token_ttl_seconds,
            )
        logger.info(
            "qr_token_issued",
            user_id=str(user_id),
            expires_at=issued.expires_at.isoformat(),
        )
        return issued

    @staticmethod
    async def _discard_expired_token(*, token_id: UUID) -> None:
        async with SessionLocal.begin() as session:
            await QrTokensRepo.delete_by_id(session, token_id)

    @staticmethod
    async def validate_qr_token(
        *,
        token: str,
        venue_id: UUID | None,
        now_utc: datetime,
    ) -> TokenValidationResult:
        token_hash = hash_qr_token(token)
        try:
            async with SessionLocal.begin() as session:
                result = await validate_and_consume_token(
                    session,
                    token_hash=token_hash,
                    now_utc=now_utc,
                )
        except ExpiredTokenFound as exc:
            await RedemptionService._discard_expired_token(token_id=exc.token_id)
            logger.info(
                "qr_token_rejected",
                code=exc.code,
                venue_id=str(venue_id) if venue_id is not None else None,
            )
            raise

        logger.info(
            "qr_token_validated",
            user_id=str(result.user_id),
            venue_id=str(venue_id) if venue_id is not None else None,
        )
        return result

    @staticmethod
    async def void_redemption(
        *,
        redemption_id: UUID,
        reason: str | None,
        actor: Actor,
        now_utc: datetime,
    ) -> VoidResult:
        void_reason = (reason or "").strip()
        if not void_reason:
            raise RedemptionValidationError("Void reason is required")

        settings = get_settings()
        async with SessionLocal.begin() as session:
            redemption = await RedemptionsRepo.get_by_id_for_update(session, redemption_id)
            if redemption is None:
                raise RedemptionNotFoundError

            current_status = parse_status(redemption.status)
            ensure_transition(current_status, RedemptionStatus.VOID)

            authorize_void(
                actor,
                venue_id=redemption.venue_id,
                redeemed_at=redemption.redeemed_at,
                now_utc=now_utc,
                staff_window=timedelta(hours=settings.void_staff_window_hours),
            )
            await enforce_void_rate_limit(
                session,
                actor_id=str(actor.user_id),
                now_utc=now_utc,
                max_voids=settings.void_rate_limit_max,
                window=timedelta(seconds=settings.void_rate_limit_window_seconds),
            )

            redemption.status = RedemptionStatus.VOID.value
            redemption.metadata_ = merge_void_metadata(
                redemption.metadata_,
                voided_at=now_utc,
                voided_by=str(actor.user_id),
                void_reason=void_reason,
            )

        logger.info(
            "redemption_voided",
            redemption_id=str(redemption_id),
            venue_id=str(redemption.venue_id),
            actor_id=str(actor.user_id),
            actor_role=actor.role.value if actor.role is not None else None,
        )
        return VoidResult(redemption_id=redemption_id, voided_at=now_utc)

    @staticmethod
    async def confirm_redemption(
        *,
        venue_id: UUID,
        user_id: UUID,
        token: str,
        drink_id: UUID | None,
        value: Decimal,
        now_utc: datetime,
    ) -> ConfirmedRedemption:
        """Records a free drink against a QR token already validated at the venue."""
        settings = get_settings()
        async with SessionLocal.begin() as session:
            qr_token = await claim_consumed_token(
                session,
                token_hash=hash_qr_token(token),
                user_id=user_id,
                now_utc=now_utc,
                ttl_seconds=settings.qr_token_ttl_seconds,
            )
            availability = await AvailabilityService.evaluate_drink(
                session,
                venue_id=venue_id,
                drink_id=drink_id,
                user_id=user_id,
                now_utc=now_utc,
            )
            if not availability.is_available:
                raise RedemptionNotAvailableError(
                    reason=availability.reason.value if availability.reason is not None else None,
                    alt_offer_text=availability.alt_offer_text,
                )

            drink_label = DEFAULT_DRINK_LABEL
            if drink_id is not None:
                drink = await VenuesRepo.get_drink(session, venue_id=venue_id, drink_id=drink_id)
                if drink is not None:
                    drink_label = drink.drink_name

            redemption = await RedemptionsRepo.create(
                session,
                redemption=Redemption(
                    id=uuid4(),
                    user_id=user_id,
                    venue_id=venue_id,
                    drink=drink_label,
                    drink_id=drink_id,
                    value=value,
                    redeemed_at=now_utc,
                    status=RedemptionStatus.SUCCESS.value,
                    metadata_={},
                ),
            )
            attached = await QrTokensRepo.attach_redemption(
                session,
                token_id=qr_token.id,
                redemption_id=redemption.id,
            )
            if not attached:
                raise TokenAlreadyUsedError

        logger.info(
            "redemption_confirmed",
            redemption_id=str(redemption.id),
            venue_id=str(venue_id),
            user_id=str(user_id),
            qr_token_id=str(qr_token.id),
        )
        try:
            await LoyaltyService.on_redemption_success(
                user_id=user_id,
                venue_id=venue_id,
                now_utc=now_utc,
            )
        except (SQLAlchemyError, TimeoutError):
            # the redemption is committed; the periodic scan picks the pair up again
            logger.exception(
                "loyalty_detection_after_redemption_failed",
                redemption_id=str(redemption.id),
            )
        return ConfirmedRedemption(
            redemption_id=redemption.id,
            user_id=user_id,
            venue_id=venue_id,
            drink=drink_label,
            value=value,
            redeemed_at=now_utc,
            status=RedemptionStatus.SUCCESS,
        )
