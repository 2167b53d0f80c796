import logging
import sys

import structlog


def configure_logging(log_level: str = "INFO", *, app_env: str | None = None) -> None:
    """Routes stdlib and structlog output through one JSON renderer on stdout.

    Shared by the API process and the Celery worker. ``app_env`` is bound
    into the context vars so every event carries it.
    """
    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )
    # asyncpg/sqlalchemy echo is too chatty at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            timestamper,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.clear_contextvars()
    if app_env:
        structlog.contextvars.bind_contextvars(app_env=app_env)
