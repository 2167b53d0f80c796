from datetime import timedelta

from app.economy.loyalty.types import MilestoneDefinition, MilestoneType, RewardType

MILESTONE_DEFINITIONS: tuple[MilestoneDefinition, ...] = (
    MilestoneDefinition(
        milestone_type=MilestoneType.FIRST_VISIT,
        label="Első Látogató",
        suggested_reward="welcome_drink",
        notify_admin=False,
        condition=lambda stats: stats.visits_total == 1,
    ),
    MilestoneDefinition(
        milestone_type=MilestoneType.RETURNING,
        label="Visszatérő",
        suggested_reward="10_percent_discount",
        notify_admin=False,
        condition=lambda stats: stats.visits_total == 3,
    ),
    MilestoneDefinition(
        milestone_type=MilestoneType.WEEKLY_REGULAR,
        label="Heti Törzsvendég",
        suggested_reward="bonus_points",
        notify_admin=True,
        condition=lambda stats: stats.visits_this_week >= 3,
    ),
    MilestoneDefinition(
        milestone_type=MilestoneType.MONTHLY_VIP,
        label="Havi VIP",
        suggested_reward="free_dessert",
        notify_admin=True,
        condition=lambda stats: stats.visits_this_month >= 10,
    ),
    MilestoneDefinition(
        milestone_type=MilestoneType.PLATINUM,
        label="Platina Tag",
        suggested_reward="vip_card",
        notify_admin=True,
        condition=lambda stats: stats.visits_total == 50,
    ),
    MilestoneDefinition(
        milestone_type=MilestoneType.LEGENDARY,
        label="Legendás",
        suggested_reward="exclusive_offers",
        notify_admin=True,
        condition=lambda stats: stats.visits_total == 100,
    ),
)

MILESTONE_DEFINITIONS_BY_TYPE = {
    definition.milestone_type.value: definition for definition in MILESTONE_DEFINITIONS
}

PENDING_ALERTS_LIMIT = 50
DEFAULT_SCAN_LOOKBACK = timedelta(hours=24)
DEFAULT_BONUS_POINTS = 50
UNKNOWN_NAME = "Ismeretlen"

REWARD_LABELS: dict[RewardType, str] = {
    RewardType.FREE_DRINK: "Ingyen ital",
    RewardType.FREE_DESSERT: "Ingyen desszert",
    RewardType.BONUS_POINTS: "{points} bónusz pont",
    RewardType.DISCOUNT_COUPON: "10% kedvezmény kupon",
    RewardType.CUSTOM: "Egyéni jutalom",
}
