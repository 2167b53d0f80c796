from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import httpx
import structlog

from app.core.config import get_settings

logger = structlog.get_logger(__name__)

AUDIENCE_ADMIN = "admin"
AUDIENCE_USER = "user"


def _build_body(
    *,
    event: str,
    audience: str,
    payload: dict[str, object],
    sent_at: datetime,
    app_env: str,
) -> dict[str, Any]:
    return {
        "event": event,
        "audience": audience,
        "app_env": app_env,
        "sent_at": sent_at.isoformat(),
        "payload": payload,
    }


async def _post_json(*, client: httpx.AsyncClient, url: str, body: dict[str, Any], event: str) -> bool:
    try:
        response = await client.post(url, json=body)
        response.raise_for_status()
        return True
    except httpx.HTTPError:
        logger.exception("notification_delivery_failed", notification_event=event)
        return False


async def send_notification(*, event: str, audience: str, payload: dict[str, object]) -> bool:
    """Posts a notification to the dispatcher webhook. Never retried."""
    settings = get_settings()
    url = settings.notifications_webhook_url.strip()
    if not url:
        logger.info("notification_skipped_no_target", notification_event=event, audience=audience)
        return False

    body = _build_body(
        event=event,
        audience=audience,
        payload=payload,
        sent_at=datetime.now(timezone.utc),
        app_env=settings.app_env,
    )
    async with httpx.AsyncClient(timeout=settings.notifications_timeout_seconds) as client:
        delivered = await _post_json(client=client, url=url, body=body, event=event)

    if delivered:
        logger.info("notification_delivered", notification_event=event, audience=audience)
    return delivered
