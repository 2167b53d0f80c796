from __future__ import annotations

from datetime import datetime, timezone

import structlog

from app.db.repo.qr_tokens_repo import QrTokensRepo
from app.db.session import SessionLocal
from app.workers.asyncio_runner import run_async_job
from app.workers.celery_app import celery_app

logger = structlog.get_logger(__name__)


async def run_qr_token_cleanup_async() -> dict[str, int]:
    now_utc = datetime.now(timezone.utc)
    async with SessionLocal.begin() as session:
        deleted_count = await QrTokensRepo.delete_expired(session, now_utc=now_utc)

    result = {"deleted_tokens": deleted_count}
    logger.info("qr_token_cleanup_finished", **result)
    return result


@celery_app.task(name="app.workers.tasks.qr_token_cleanup.run_qr_token_cleanup")
def run_qr_token_cleanup() -> dict[str, int]:
    return run_async_job(run_qr_token_cleanup_async(), job_name="qr_token_cleanup")


celery_app.conf.beat_schedule = celery_app.conf.beat_schedule or {}
celery_app.conf.beat_schedule.update(
    {
        "qr-token-cleanup-every-minute": {
            "task": "app.workers.tasks.qr_token_cleanup.run_qr_token_cleanup",
            "schedule": 60.0,
            "options": {"queue": "q_normal"},
        },
    }
)
