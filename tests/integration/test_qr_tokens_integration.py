from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from app.db.models.user_qr_tokens import UserQRToken
from app.db.repo.profiles_repo import ProfilesRepo
from app.db.session import SessionLocal
from app.economy.redemptions.errors import TokenAlreadyUsedError, TokenExpiredError, TokenNotFoundError
from app.economy.redemptions.service import RedemptionService
from app.services.qr_tokens import hash_qr_token
from app.workers.tasks.qr_token_cleanup import run_qr_token_cleanup_async
from tests.integration.come_get_it_fixtures import create_profile

UTC = timezone.utc


@pytest.mark.asyncio
async def test_issued_token_is_stored_only_as_hash() -> None:
    now_utc = datetime.now(UTC)
    user_id = await create_profile(name="Anna")

    issued = await RedemptionService.issue_qr_token(user_id=user_id, now_utc=now_utc)

    async with SessionLocal.begin() as session:
        stored = await session.scalar(select(UserQRToken).where(UserQRToken.user_id == user_id))

    assert stored is not None
    assert stored.token_hash == hash_qr_token(issued.token)
    assert stored.token_hash != issued.token
    assert issued.expires_in_seconds == 120


@pytest.mark.asyncio
async def test_validate_returns_user_and_points() -> None:
    now_utc = datetime.now(UTC)
    user_id = await create_profile(name="Anna")
    async with SessionLocal.begin() as session:
        await ProfilesRepo.add_points(session, user_id=user_id, amount=340, now_utc=now_utc)
    issued = await RedemptionService.issue_qr_token(user_id=user_id, now_utc=now_utc)

    result = await RedemptionService.validate_qr_token(token=issued.token, venue_id=None, now_utc=now_utc)

    assert result.user_id == user_id
    assert result.user_name == "Anna"
    assert result.points_balance == 340


@pytest.mark.asyncio
async def test_parallel_validation_consumes_token_once() -> None:
    now_utc = datetime.now(UTC)
    user_id = await create_profile()
    issued = await RedemptionService.issue_qr_token(user_id=user_id, now_utc=now_utc)
    barrier = asyncio.Event()

    async def _attempt() -> str:
        await barrier.wait()
        try:
            await RedemptionService.validate_qr_token(token=issued.token, venue_id=None, now_utc=now_utc)
            return "valid"
        except TokenAlreadyUsedError:
            return "already_used"

    task_1 = asyncio.create_task(_attempt())
    task_2 = asyncio.create_task(_attempt())
    barrier.set()
    outcomes = await asyncio.gather(task_1, task_2)

    assert sorted(outcomes) == ["already_used", "valid"]


@pytest.mark.asyncio
async def test_expired_token_is_rejected_and_deleted() -> None:
    now_utc = datetime.now(UTC)
    user_id = await create_profile()
    issued = await RedemptionService.issue_qr_token(user_id=user_id, now_utc=now_utc - timedelta(minutes=5))

    with pytest.raises(TokenExpiredError):
        await RedemptionService.validate_qr_token(token=issued.token, venue_id=None, now_utc=now_utc)

    async with SessionLocal.begin() as session:
        remaining = await session.scalar(select(func.count(UserQRToken.id)))
    assert remaining == 0

    with pytest.raises(TokenNotFoundError):
        await RedemptionService.validate_qr_token(token=issued.token, venue_id=None, now_utc=now_utc)


@pytest.mark.asyncio
async def test_cleanup_job_deletes_only_unused_expired_tokens() -> None:
    now_utc = datetime.now(UTC)
    user_id = await create_profile()
    await RedemptionService.issue_qr_token(user_id=user_id, now_utc=now_utc - timedelta(minutes=10))
    used = await RedemptionService.issue_qr_token(user_id=user_id, now_utc=now_utc - timedelta(minutes=10))
    await RedemptionService.issue_qr_token(user_id=user_id, now_utc=now_utc)
    await RedemptionService.validate_qr_token(
        token=used.token,
        venue_id=None,
        now_utc=now_utc - timedelta(minutes=9),
    )

    result = await run_qr_token_cleanup_async()

    assert result == {"deleted_tokens": 1}
    async with SessionLocal.begin() as session:
        remaining = await session.scalar(select(func.count(UserQRToken.id)))
    assert remaining == 2
