from app.economy.redemptions.types import ActorRole, RedemptionStatus, VoidPolicy

ALLOWED_TRANSITIONS: dict[RedemptionStatus, frozenset[RedemptionStatus]] = {
    RedemptionStatus.PENDING: frozenset(
        {RedemptionStatus.SUCCESS, RedemptionStatus.FAILED, RedemptionStatus.EXPIRED}
    ),
    RedemptionStatus.SUCCESS: frozenset({RedemptionStatus.VOID}),
    RedemptionStatus.VOID: frozenset(),
    RedemptionStatus.FAILED: frozenset(),
    RedemptionStatus.EXPIRED: frozenset(),
}

VOID_POLICY_BY_ROLE: dict[ActorRole, VoidPolicy] = {
    ActorRole.CGI_ADMIN: VoidPolicy(venue_scoped=False, time_limited=False),
    ActorRole.VENUE_OWNER: VoidPolicy(venue_scoped=True, time_limited=True),
    ActorRole.VENUE_STAFF: VoidPolicy(venue_scoped=True, time_limited=True),
}

VOID_METADATA_KEYS = ("voided_at", "voided_by", "void_reason")

DEFAULT_DRINK_LABEL = "Free drink"
