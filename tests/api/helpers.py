from __future__ import annotations

from types import SimpleNamespace
from uuid import UUID

from app.economy.redemptions.types import Actor, ActorRole

VENUE_ID = UUID("00000000-0000-0000-0000-00000000a001")
USER_ID = UUID("00000000-0000-0000-0000-0000000000c1")
STAFF_ID = UUID("00000000-0000-0000-0000-0000000000b1")
ADMIN_ID = UUID("00000000-0000-0000-0000-0000000000a9")

STAFF = Actor(user_id=STAFF_ID, role=ActorRole.VENUE_STAFF, venue_ids=frozenset({VENUE_ID}))
ADMIN = Actor(user_id=ADMIN_ID, role=ActorRole.CGI_ADMIN)
GUEST = Actor(user_id=USER_ID, role=None)

BEARER = {"Authorization": "Bearer access-token"}


def pos_settings(**overrides: object) -> SimpleNamespace:
    base = {"pos_api_key": "pos-secret"}
    base.update(overrides)
    return SimpleNamespace(**base)


def internal_settings(**overrides: object) -> SimpleNamespace:
    base = {
        "internal_api_token": "internal-secret",
        "internal_api_allowlist": "127.0.0.1/32",
        "internal_api_trusted_proxies": "",
    }
    base.update(overrides)
    return SimpleNamespace(**base)


def as_actor(actor: Actor):
    async def _resolve(request) -> Actor:  # noqa: ARG001
        return actor

    return _resolve
