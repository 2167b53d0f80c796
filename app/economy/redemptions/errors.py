from __future__ import annotations


class RedemptionError(Exception):
    code = "REDEMPTION_ERROR"
    default_message = "Redemption request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class RedemptionValidationError(RedemptionError):
    code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class RedemptionNotFoundError(RedemptionError):
    code = "REDEMPTION_NOT_FOUND"
    default_message = "Redemption not found"


class RedemptionInvalidStateError(RedemptionError):
    code = "INVALID_STATE"
    default_message = "Redemption is not in a voidable state"


class RedemptionForbiddenError(RedemptionError):
    code = "FORBIDDEN"
    default_message = "Not allowed to void this redemption"


class RedemptionRateLimitedError(RedemptionError):
    code = "RATE_LIMITED"
    default_message = "Too many voids, try again later"


class RedemptionNotAvailableError(RedemptionError):
    code = "NOT_AVAILABLE"
    default_message = "Free drink is not available right now"

    def __init__(
        self,
        message: str | None = None,
        *,
        reason: str | None = None,
        alt_offer_text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.alt_offer_text = alt_offer_text


class TokenNotFoundError(RedemptionError):
    code = "TOKEN_NOT_FOUND"
    default_message = "QR token not found"


class TokenExpiredError(RedemptionError):
    code = "TOKEN_EXPIRED"
    default_message = "QR token expired"


class TokenAlreadyUsedError(RedemptionError):
    code = "TOKEN_ALREADY_USED"
    default_message = "QR token already used"


class TokenNotValidatedError(RedemptionError):
    code = "TOKEN_NOT_VALIDATED"
    default_message = "QR token has not been validated at the venue"


class TokenUserMismatchError(RedemptionError):
    code = "TOKEN_USER_MISMATCH"
    default_message = "QR token belongs to another user"
