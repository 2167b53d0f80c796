from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request

from app.core.config import get_settings
from app.economy.redemptions.errors import (
    TokenAlreadyUsedError,
    TokenExpiredError,
    TokenNotFoundError,
)
from app.economy.redemptions.service import RedemptionService

from .access import assert_pos_access, error_detail, resolve_actor
from .redemptions_models import (
    QrTokenIssueRequest,
    QrTokenIssueResponse,
    ValidateQrRequest,
    ValidateQrResponse,
)

router = APIRouter(tags=["qr"])


@router.post("/qr-tokens", response_model=QrTokenIssueResponse)
async def issue_qr_token(payload: QrTokenIssueRequest, request: Request) -> QrTokenIssueResponse:
    actor = await resolve_actor(request)
    if actor.user_id != payload.user_id:
        raise HTTPException(
            status_code=403,
            detail=error_detail("FORBIDDEN", "Tokens can only be issued for yourself"),
        )

    issued = await RedemptionService.issue_qr_token(
        user_id=payload.user_id,
        now_utc=datetime.now(timezone.utc),
    )
    return QrTokenIssueResponse(
        token=issued.token,
        expires_at=issued.expires_at,
        expires_in_seconds=issued.expires_in_seconds,
    )


@router.post("/validate-qr", response_model=ValidateQrResponse)
async def validate_qr(payload: ValidateQrRequest, request: Request) -> ValidateQrResponse:
    assert_pos_access(request, settings=get_settings())

    try:
        result = await RedemptionService.validate_qr_token(
            token=payload.token,
            venue_id=payload.venue_id,
            now_utc=datetime.now(timezone.utc),
        )
    except TokenNotFoundError as exc:
        raise HTTPException(status_code=404, detail=error_detail(exc.code, exc.message)) from exc
    except TokenExpiredError as exc:
        raise HTTPException(status_code=410, detail=error_detail(exc.code, exc.message)) from exc
    except TokenAlreadyUsedError as exc:
        raise HTTPException(status_code=409, detail=error_detail(exc.code, exc.message)) from exc

    return ValidateQrResponse(
        valid=True,
        user_id=result.user_id,
        user_name=result.user_name or "User",
        points_balance=result.points_balance,
        validated_at=result.validated_at,
    )
