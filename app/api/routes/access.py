from __future__ import annotations

import structlog
from fastapi import HTTPException, Request

from app.db.session import SessionLocal
from app.economy.redemptions.types import Actor
from app.services.identity import (
    IdentityUnavailableError,
    extract_bearer_token,
    fetch_user_id,
    load_actor,
)
from app.services.internal_auth import (
    extract_client_ip,
    is_client_ip_allowed,
    is_internal_request_authenticated,
    is_pos_request_authenticated,
)

logger = structlog.get_logger(__name__)


def error_detail(code: str, message: str | None = None) -> dict[str, str]:
    detail = {"code": code}
    if message:
        detail["message"] = message
    return detail


def assert_internal_access(request: Request, *, settings: object) -> None:
    client_ip = extract_client_ip(
        request,
        trusted_proxies=getattr(settings, "internal_api_trusted_proxies", ""),
    )
    if not is_client_ip_allowed(
        client_ip=client_ip,
        allowlist=getattr(settings, "internal_api_allowlist", ""),
    ):
        logger.warning("internal_auth_failed", reason="ip_not_allowed", client_ip=client_ip)
        raise HTTPException(status_code=403, detail=error_detail("FORBIDDEN"))

    if not is_internal_request_authenticated(
        request,
        expected_token=getattr(settings, "internal_api_token", ""),
    ):
        logger.warning("internal_auth_failed", reason="invalid_credentials", client_ip=client_ip)
        raise HTTPException(status_code=403, detail=error_detail("FORBIDDEN"))


def assert_pos_access(request: Request, *, settings: object) -> None:
    if not is_pos_request_authenticated(
        request,
        expected_api_key=getattr(settings, "pos_api_key", ""),
    ):
        logger.warning("pos_auth_failed", path=request.url.path)
        raise HTTPException(
            status_code=401,
            detail=error_detail("UNAUTHORIZED", "Missing or invalid API key"),
        )


async def resolve_actor(request: Request) -> Actor:
    access_token = extract_bearer_token(request.headers.get("Authorization"))
    if access_token is None:
        raise HTTPException(
            status_code=401,
            detail=error_detail("UNAUTHORIZED", "Missing bearer token"),
        )

    try:
        user_id = await fetch_user_id(access_token)
    except IdentityUnavailableError as exc:
        raise HTTPException(
            status_code=503,
            detail=error_detail("IDENTITY_UNAVAILABLE", "Identity provider unavailable"),
        ) from exc
    if user_id is None:
        raise HTTPException(
            status_code=401,
            detail=error_detail("UNAUTHORIZED", "Invalid bearer token"),
        )

    async with SessionLocal.begin() as session:
        return await load_actor(session, user_id=user_id)


def assert_admin(actor: Actor) -> None:
    if not actor.is_admin:
        raise HTTPException(
            status_code=403,
            detail=error_detail("FORBIDDEN", "Admin access required"),
        )
