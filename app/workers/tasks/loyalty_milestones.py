from __future__ import annotations

from datetime import datetime, timezone

import structlog

from app.economy.loyalty.service import LoyaltyService
from app.workers.asyncio_runner import run_async_job
from app.workers.celery_app import celery_app

logger = structlog.get_logger(__name__)


async def run_loyalty_milestone_scan_async() -> dict[str, int]:
    now_utc = datetime.now(timezone.utc)
    recorded = await LoyaltyService.scan_recent(now_utc=now_utc)

    result = {
        "milestones_created": len(recorded),
        "admin_alerts": sum(1 for milestone in recorded if not milestone.admin_notified),
    }
    logger.info("loyalty_milestone_scan_job_finished", **result)
    return result


@celery_app.task(name="app.workers.tasks.loyalty_milestones.run_loyalty_milestone_scan")
def run_loyalty_milestone_scan() -> dict[str, int]:
    return run_async_job(run_loyalty_milestone_scan_async(), job_name="loyalty_milestone_scan")


celery_app.conf.beat_schedule = celery_app.conf.beat_schedule or {}
celery_app.conf.beat_schedule.update(
    {
        "loyalty-milestone-scan-every-10-minutes": {
            "task": "app.workers.tasks.loyalty_milestones.run_loyalty_milestone_scan",
            "schedule": 600.0,
            "options": {"queue": "q_normal"},
        },
    }
)
