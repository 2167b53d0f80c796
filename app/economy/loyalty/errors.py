class LoyaltyError(Exception):
    pass


class MilestoneNotFoundError(LoyaltyError):
    pass


class MilestoneRewardAlreadySentError(LoyaltyError):
    pass
