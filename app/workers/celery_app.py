from celery import Celery
from celery.signals import setup_logging

from app.core.config import get_settings
from app.core.logging import configure_logging

settings = get_settings()

celery_app = Celery(
    "come_get_it",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "app.workers.tasks.loyalty_milestones",
        "app.workers.tasks.qr_token_cleanup",
    ],
)

celery_app.conf.update(
    task_default_queue="q_normal",
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    # beat crontabs follow venue-local time; interval schedules are unaffected
    timezone=settings.default_venue_timezone,
    enable_utc=True,
)


@setup_logging.connect
def configure_worker_logging(**_kwargs) -> None:
    configure_logging(settings.log_level, app_env=settings.app_env)


@celery_app.task(name="app.workers.celery_app.ping")
def ping() -> str:
    return "pong"
