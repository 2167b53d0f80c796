from app.db.repo.milestones_repo import MilestonesRepo
from app.db.repo.profiles_repo import ProfilesRepo
from app.db.repo.qr_tokens_repo import QrTokensRepo
from app.db.repo.redemptions_repo import RedemptionsRepo
from app.db.repo.venues_repo import VenuesRepo

__all__ = [
    "MilestonesRepo",
    "ProfilesRepo",
    "QrTokensRepo",
    "RedemptionsRepo",
    "VenuesRepo",
]
