from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class RedemptionStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    VOID = "void"
    FAILED = "failed"
    EXPIRED = "expired"


class ActorRole(str, Enum):
    CGI_ADMIN = "cgi_admin"
    VENUE_OWNER = "venue_owner"
    VENUE_STAFF = "venue_staff"


@dataclass(frozen=True, slots=True)
class Actor:
    user_id: UUID
    role: ActorRole | None
    venue_ids: frozenset[UUID] = frozenset()
    name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.CGI_ADMIN


@dataclass(frozen=True, slots=True)
class VoidPolicy:
    venue_scoped: bool
    time_limited: bool


@dataclass(slots=True)
class RedemptionMetadata:
    """Typed view of ``redemptions.metadata``.

    Recognized void keys are typed fields; everything else is kept verbatim in
    ``extra`` and written back on every merge.
    """

    voided_at: datetime | None = None
    voided_by: str | None = None
    void_reason: str | None = None
    extra: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class IssuedQrToken:
    token: str
    expires_at: datetime
    expires_in_seconds: int


@dataclass(frozen=True, slots=True)
class TokenValidationResult:
    user_id: UUID
    user_name: str | None
    points_balance: int
    validated_at: datetime


@dataclass(frozen=True, slots=True)
class VoidResult:
    redemption_id: UUID
    voided_at: datetime


@dataclass(frozen=True, slots=True)
class ConfirmedRedemption:
    redemption_id: UUID
    user_id: UUID
    venue_id: UUID
    drink: str
    value: Decimal
    redeemed_at: datetime
    status: RedemptionStatus
