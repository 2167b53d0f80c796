from app.economy.availability.service import AvailabilityService
from app.economy.caps.service import CapAccountingService
from app.economy.loyalty.service import LoyaltyService
from app.economy.redemptions.service import RedemptionService

__all__ = [
    "AvailabilityService",
    "CapAccountingService",
    "LoyaltyService",
    "RedemptionService",
]
