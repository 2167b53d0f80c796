class AvailabilityError(Exception):
    pass


class VenueNotFoundError(AvailabilityError):
    pass


class DrinkNotFoundError(AvailabilityError):
    pass
