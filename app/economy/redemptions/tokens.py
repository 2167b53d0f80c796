from __future__ import annotations

from datetime import datetime, timedelta
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.user_qr_tokens import UserQRToken
from app.db.repo.profiles_repo import ProfilesRepo
from app.db.repo.qr_tokens_repo import QrTokensRepo
from app.economy.redemptions.errors import (
    TokenAlreadyUsedError,
    TokenExpiredError,
    TokenNotFoundError,
    TokenNotValidatedError,
    TokenUserMismatchError,
)
from app.economy.redemptions.types import IssuedQrToken, TokenValidationResult
from app.services.qr_tokens import generate_qr_token, hash_qr_token

DEFAULT_USER_NAME = "User"


class ExpiredTokenFound(TokenExpiredError):
    def __init__(self, *, token_id: UUID) -> None:
        super().__init__()
        self.token_id = token_id


async def issue_token(
    session: AsyncSession,
    *,
    user_id: UUID,
    now_utc: datetime,
    ttl_seconds: int,
) -> IssuedQrToken:
    raw_token = generate_qr_token()
    expires_at = now_utc + timedelta(seconds=ttl_seconds)
    await QrTokensRepo.create(
        session,
        token=UserQRToken(
            id=uuid4(),
            user_id=user_id,
            token_hash=hash_qr_token(raw_token),
            expires_at=expires_at,
            used_at=None,
            created_at=now_utc,
        ),
    )
    return IssuedQrToken(token=raw_token, expires_at=expires_at, expires_in_seconds=ttl_seconds)


async def validate_and_consume_token(
    session: AsyncSession,
    *,
    token_hash: str,
    now_utc: datetime,
) -> TokenValidationResult:
    """Consumes a QR token exactly once.

    Expired tokens raise ``ExpiredTokenFound`` carrying the row id so the caller
    can delete it outside the rolled-back transaction.
    """
    token = await QrTokensRepo.get_by_hash(session, token_hash)
    if token is None:
        raise TokenNotFoundError
    if token.expires_at < now_utc:
        raise ExpiredTokenFound(token_id=token.id)
    if token.used_at is not None:
        raise TokenAlreadyUsedError

    consumed = await QrTokensRepo.mark_used_if_unused(
        session,
        token_id=token.id,
        used_at=now_utc,
    )
    if not consumed:
        raise TokenAlreadyUsedError

    profile = await ProfilesRepo.get_by_id(session, token.user_id)
    points_balance = await ProfilesRepo.get_points_balance(session, user_id=token.user_id)
    return TokenValidationResult(
        user_id=token.user_id,
        user_name=(profile.name if profile is not None and profile.name else DEFAULT_USER_NAME),
        points_balance=points_balance,
        validated_at=now_utc,
    )


async def claim_consumed_token(
    session: AsyncSession,
    *,
    token_hash: str,
    user_id: UUID,
    now_utc: datetime,
    ttl_seconds: int,
) -> UserQRToken:
    """Locks a validated token so it can back exactly one redemption.

    The token must have been consumed at the venue for the same user within
    ``ttl_seconds`` and not be linked to a redemption yet.
    """
    token = await QrTokensRepo.get_by_hash_for_update(session, token_hash)
    if token is None:
        raise TokenNotFoundError
    if token.user_id != user_id:
        raise TokenUserMismatchError
    if token.used_at is None:
        raise TokenNotValidatedError
    if token.redemption_id is not None:
        raise TokenAlreadyUsedError
    if token.used_at + timedelta(seconds=ttl_seconds) < now_utc:
        raise TokenExpiredError
    return token
