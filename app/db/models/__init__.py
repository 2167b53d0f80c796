from app.db.models.free_drink_windows import FreeDrinkWindow
from app.db.models.loyalty_milestones import LoyaltyMilestone
from app.db.models.profiles import Profile
from app.db.models.redemptions import Redemption
from app.db.models.user_points import UserPoints
from app.db.models.user_qr_tokens import UserQRToken
from app.db.models.venue_drinks import VenueDrink
from app.db.models.venue_memberships import VenueMembership
from app.db.models.venues import Venue

__all__ = [
    "FreeDrinkWindow",
    "LoyaltyMilestone",
    "Profile",
    "Redemption",
    "UserPoints",
    "UserQRToken",
    "Venue",
    "VenueDrink",
    "VenueMembership",
]
