from __future__ import annotations

from uuid import UUID

import httpx
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.repo.profiles_repo import ProfilesRepo
from app.economy.redemptions.types import Actor, ActorRole

logger = structlog.get_logger(__name__)

IDENTITY_USER_PATH = "/auth/v1/user"


class IdentityError(Exception):
    pass


class IdentityUnavailableError(IdentityError):
    pass


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def fetch_user_id(access_token: str) -> UUID | None:
    """Asks the identity provider who owns ``access_token``.

    Returns None for rejected tokens; transport failures raise
    IdentityUnavailableError.
    """
    settings = get_settings()
    base_url = settings.identity_provider_url.rstrip("/")
    if not base_url:
        raise IdentityUnavailableError("identity provider is not configured")

    headers = {"Authorization": f"Bearer {access_token}"}
    if settings.identity_provider_api_key:
        headers["apikey"] = settings.identity_provider_api_key

    try:
        async with httpx.AsyncClient(timeout=settings.identity_timeout_seconds) as client:
            response = await client.get(f"{base_url}{IDENTITY_USER_PATH}", headers=headers)
    except httpx.HTTPError as exc:
        logger.warning("identity_provider_request_failed", error_type=type(exc).__name__)
        raise IdentityUnavailableError("identity provider request failed") from exc

    if response.status_code in {401, 403}:
        return None
    if response.status_code >= 400:
        logger.warning("identity_provider_error_status", status_code=response.status_code)
        raise IdentityUnavailableError(f"identity provider returned {response.status_code}")

    raw_id = response.json().get("id")
    try:
        return UUID(str(raw_id))
    except ValueError:
        return None


async def load_actor(session: AsyncSession, *, user_id: UUID) -> Actor:
    profile = await ProfilesRepo.get_by_id(session, user_id)
    memberships = await ProfilesRepo.list_memberships(session, profile_id=user_id)
    venue_ids = frozenset(membership.venue_id for membership in memberships)

    role: ActorRole | None = None
    if profile is not None and profile.is_admin:
        role = ActorRole.CGI_ADMIN
    elif any(membership.role == "owner" for membership in memberships):
        role = ActorRole.VENUE_OWNER
    elif memberships:
        role = ActorRole.VENUE_STAFF

    return Actor(
        user_id=user_id,
        role=role,
        venue_ids=venue_ids,
        name=profile.name if profile is not None else None,
    )
