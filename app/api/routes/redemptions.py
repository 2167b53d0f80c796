from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request

from app.core.config import get_settings
from app.economy.availability.errors import DrinkNotFoundError, VenueNotFoundError
from app.economy.redemptions.errors import (
    RedemptionForbiddenError,
    RedemptionInvalidStateError,
    RedemptionNotAvailableError,
    RedemptionNotFoundError,
    RedemptionRateLimitedError,
    RedemptionValidationError,
    TokenAlreadyUsedError,
    TokenExpiredError,
    TokenNotFoundError,
    TokenNotValidatedError,
    TokenUserMismatchError,
)
from app.economy.redemptions.service import RedemptionService

from .access import assert_pos_access, error_detail, resolve_actor
from .redemptions_models import (
    ConfirmRedemptionRequest,
    ConfirmRedemptionResponse,
    VoidRedemptionRequest,
    VoidRedemptionResponse,
)

router = APIRouter(tags=["redemptions"])


@router.post("/void-redemption", response_model=VoidRedemptionResponse)
async def void_redemption(
    payload: VoidRedemptionRequest,
    request: Request,
) -> VoidRedemptionResponse:
    actor = await resolve_actor(request)

    try:
        result = await RedemptionService.void_redemption(
            redemption_id=payload.redemption_id,
            reason=payload.reason,
            actor=actor,
            now_utc=datetime.now(timezone.utc),
        )
    except RedemptionValidationError as exc:
        raise HTTPException(status_code=422, detail=error_detail(exc.code, exc.message)) from exc
    except RedemptionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=error_detail(exc.code, exc.message)) from exc
    except RedemptionInvalidStateError as exc:
        raise HTTPException(status_code=409, detail=error_detail(exc.code, exc.message)) from exc
    except RedemptionForbiddenError as exc:
        raise HTTPException(status_code=403, detail=error_detail(exc.code, exc.message)) from exc
    except RedemptionRateLimitedError as exc:
        raise HTTPException(status_code=429, detail=error_detail(exc.code, exc.message)) from exc

    return VoidRedemptionResponse(
        success=True,
        redemption_id=result.redemption_id,
        voided_at=result.voided_at,
    )


@router.post("/redemptions", response_model=ConfirmRedemptionResponse)
async def confirm_redemption(
    payload: ConfirmRedemptionRequest,
    request: Request,
) -> ConfirmRedemptionResponse:
    assert_pos_access(request, settings=get_settings())

    try:
        result = await RedemptionService.confirm_redemption(
            venue_id=payload.venue_id,
            user_id=payload.user_id,
            token=payload.token,
            drink_id=payload.drink_id,
            value=payload.value,
            now_utc=datetime.now(timezone.utc),
        )
    except VenueNotFoundError as exc:
        raise HTTPException(
            status_code=404,
            detail=error_detail("VENUE_NOT_FOUND", "Venue not found"),
        ) from exc
    except DrinkNotFoundError as exc:
        raise HTTPException(
            status_code=404,
            detail=error_detail("DRINK_NOT_FOUND", "Drink not found"),
        ) from exc
    except TokenNotFoundError as exc:
        raise HTTPException(status_code=404, detail=error_detail(exc.code, exc.message)) from exc
    except TokenExpiredError as exc:
        raise HTTPException(status_code=410, detail=error_detail(exc.code, exc.message)) from exc
    except (TokenAlreadyUsedError, TokenNotValidatedError, TokenUserMismatchError) as exc:
        raise HTTPException(status_code=409, detail=error_detail(exc.code, exc.message)) from exc
    except RedemptionNotAvailableError as exc:
        detail = error_detail(exc.code, exc.message)
        if exc.reason is not None:
            detail["reason"] = exc.reason
        if exc.alt_offer_text:
            detail["alt_offer_text"] = exc.alt_offer_text
        raise HTTPException(status_code=409, detail=detail) from exc

    return ConfirmRedemptionResponse(
        redemption_id=result.redemption_id,
        user_id=result.user_id,
        venue_id=result.venue_id,
        drink=result.drink,
        value=result.value,
        redeemed_at=result.redeemed_at,
        status=result.status.value,
    )
