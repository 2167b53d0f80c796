from __future__ import annotations

import pytest

from app.workers.celery_app import celery_app
from app.workers.tasks import qr_token_cleanup
from tests.economy.helpers import DummySessionLocal


def test_run_qr_token_cleanup_task_wrapper(monkeypatch) -> None:
    async def fake_async() -> dict[str, int]:
        return {"deleted_tokens": 4}

    monkeypatch.setattr(qr_token_cleanup, "run_qr_token_cleanup_async", fake_async)

    result = qr_token_cleanup.run_qr_token_cleanup()
    assert result == {"deleted_tokens": 4}


@pytest.mark.asyncio
async def test_run_qr_token_cleanup_async_deletes_expired_tokens(monkeypatch) -> None:
    async def _delete_expired(session, *, now_utc):  # noqa: ARG001
        return 5

    monkeypatch.setattr(qr_token_cleanup, "SessionLocal", DummySessionLocal())
    monkeypatch.setattr(qr_token_cleanup.QrTokensRepo, "delete_expired", _delete_expired)

    result = await qr_token_cleanup.run_qr_token_cleanup_async()
    assert result == {"deleted_tokens": 5}


def test_qr_token_cleanup_is_scheduled_every_minute() -> None:
    entry = celery_app.conf.beat_schedule["qr-token-cleanup-every-minute"]
    assert entry["schedule"] == 60.0
