from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from fastapi.testclient import TestClient

from app.api.routes import qr, redemptions
from app.economy.redemptions.errors import (
    RedemptionForbiddenError,
    RedemptionInvalidStateError,
    RedemptionNotAvailableError,
    RedemptionRateLimitedError,
    TokenAlreadyUsedError,
    TokenExpiredError,
    TokenNotFoundError,
    TokenNotValidatedError,
    TokenUserMismatchError,
)
from app.economy.redemptions.types import (
    ConfirmedRedemption,
    IssuedQrToken,
    RedemptionStatus,
    TokenValidationResult,
    VoidResult,
)
from app.main import app
from tests.api.helpers import BEARER, GUEST, STAFF, USER_ID, VENUE_ID, as_actor, pos_settings

NOW_UTC = datetime(2024, 1, 15, 13, 30, tzinfo=timezone.utc)
REDEMPTION_ID = UUID("00000000-0000-0000-0000-0000000000d1")
POS_HEADERS = {"X-API-Key": "pos-secret"}


def test_issue_qr_token_for_self(monkeypatch) -> None:
    async def _issue(*, user_id, now_utc):  # noqa: ARG001
        return IssuedQrToken(token="raw-token", expires_at=NOW_UTC, expires_in_seconds=120)

    monkeypatch.setattr(qr, "resolve_actor", as_actor(GUEST))
    monkeypatch.setattr(qr.RedemptionService, "issue_qr_token", _issue)

    client = TestClient(app)
    response = client.post("/qr-tokens", json={"user_id": str(USER_ID)}, headers=BEARER)

    assert response.status_code == 200
    assert response.json()["token"] == "raw-token"
    assert response.json()["expires_in_seconds"] == 120


def test_issue_qr_token_for_someone_else_is_forbidden(monkeypatch) -> None:
    monkeypatch.setattr(qr, "resolve_actor", as_actor(STAFF))

    client = TestClient(app)
    response = client.post("/qr-tokens", json={"user_id": str(USER_ID)}, headers=BEARER)

    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "FORBIDDEN"


def test_validate_qr_returns_user_summary(monkeypatch) -> None:
    async def _validate(*, token, venue_id, now_utc):  # noqa: ARG001
        assert token == "raw-token"
        return TokenValidationResult(
            user_id=USER_ID,
            user_name=None,
            points_balance=340,
            validated_at=NOW_UTC,
        )

    monkeypatch.setattr(qr, "get_settings", lambda: pos_settings())
    monkeypatch.setattr(qr.RedemptionService, "validate_qr_token", _validate)

    client = TestClient(app)
    response = client.post("/validate-qr", json={"token": "raw-token"}, headers=POS_HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is True
    assert body["user_id"] == str(USER_ID)
    assert body["user_name"] == "User"
    assert body["points_balance"] == 340


def test_validate_qr_maps_token_errors(monkeypatch) -> None:
    monkeypatch.setattr(qr, "get_settings", lambda: pos_settings())
    client = TestClient(app)

    for error, status_code in (
        (TokenNotFoundError(), 404),
        (TokenExpiredError(), 410),
        (TokenAlreadyUsedError(), 409),
    ):

        async def _validate(*, token, venue_id, now_utc, _error=error):  # noqa: ARG001
            raise _error

        monkeypatch.setattr(qr.RedemptionService, "validate_qr_token", _validate)
        response = client.post("/validate-qr", json={"token": "raw-token"}, headers=POS_HEADERS)

        assert response.status_code == status_code
        assert response.json()["detail"]["code"] == error.code


def test_void_redemption_success(monkeypatch) -> None:
    async def _void(*, redemption_id, reason, actor, now_utc):  # noqa: ARG001
        assert actor == STAFF
        assert reason == "Wrong customer"
        return VoidResult(redemption_id=redemption_id, voided_at=NOW_UTC)

    monkeypatch.setattr(redemptions, "resolve_actor", as_actor(STAFF))
    monkeypatch.setattr(redemptions.RedemptionService, "void_redemption", _void)

    client = TestClient(app)
    response = client.post(
        "/void-redemption",
        json={"redemption_id": str(REDEMPTION_ID), "reason": "Wrong customer"},
        headers=BEARER,
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "redemption_id": str(REDEMPTION_ID),
        "voided_at": "2024-01-15T13:30:00Z",
    }


def test_void_redemption_without_reason_is_validation_error(monkeypatch) -> None:
    monkeypatch.setattr(redemptions, "resolve_actor", as_actor(STAFF))

    client = TestClient(app)
    response = client.post(
        "/void-redemption",
        json={"redemption_id": str(REDEMPTION_ID)},
        headers=BEARER,
    )

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "VALIDATION_ERROR"


def test_void_redemption_maps_domain_errors(monkeypatch) -> None:
    monkeypatch.setattr(redemptions, "resolve_actor", as_actor(STAFF))
    client = TestClient(app)

    for error, status_code in (
        (RedemptionInvalidStateError(), 409),
        (RedemptionForbiddenError(), 403),
        (RedemptionRateLimitedError(), 429),
    ):

        async def _void(*, redemption_id, reason, actor, now_utc, _error=error):  # noqa: ARG001
            raise _error

        monkeypatch.setattr(redemptions.RedemptionService, "void_redemption", _void)
        response = client.post(
            "/void-redemption",
            json={"redemption_id": str(REDEMPTION_ID), "reason": "dup"},
            headers=BEARER,
        )

        assert response.status_code == status_code
        assert response.json()["detail"]["code"] == error.code


def test_confirm_redemption_success(monkeypatch) -> None:
    async def _confirm(*, venue_id, user_id, token, drink_id, value, now_utc):  # noqa: ARG001
        return ConfirmedRedemption(
            redemption_id=REDEMPTION_ID,
            user_id=user_id,
            venue_id=venue_id,
            drink="Free drink",
            value=value,
            redeemed_at=NOW_UTC,
            status=RedemptionStatus.SUCCESS,
        )

    monkeypatch.setattr(redemptions, "get_settings", lambda: pos_settings())
    monkeypatch.setattr(redemptions.RedemptionService, "confirm_redemption", _confirm)

    client = TestClient(app)
    response = client.post(
        "/redemptions",
        json={"venue_id": str(VENUE_ID), "user_id": str(USER_ID), "token": "raw-token", "value": "1500.00"},
        headers=POS_HEADERS,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["redemption_id"] == str(REDEMPTION_ID)
    assert body["status"] == "success"
    assert Decimal(body["value"]) == Decimal("1500.00")


def test_confirm_redemption_not_available(monkeypatch) -> None:
    async def _confirm(*, venue_id, user_id, token, drink_id, value, now_utc):  # noqa: ARG001
        raise RedemptionNotAvailableError(reason="CAP_EXHAUSTED", alt_offer_text="Happy hour")

    monkeypatch.setattr(redemptions, "get_settings", lambda: pos_settings())
    monkeypatch.setattr(redemptions.RedemptionService, "confirm_redemption", _confirm)

    client = TestClient(app)
    response = client.post(
        "/redemptions",
        json={"venue_id": str(VENUE_ID), "user_id": str(USER_ID), "token": "raw-token"},
        headers=POS_HEADERS,
    )

    assert response.status_code == 409
    assert response.json() == {
        "detail": {
            "code": "NOT_AVAILABLE",
            "message": "Free drink is not available right now",
            "reason": "CAP_EXHAUSTED",
            "alt_offer_text": "Happy hour",
        }
    }


def test_confirm_redemption_requires_token(monkeypatch) -> None:
    async def _confirm(**kwargs):  # noqa: ARG001
        raise AssertionError("service must not be called without a token")

    monkeypatch.setattr(redemptions, "get_settings", lambda: pos_settings())
    monkeypatch.setattr(redemptions.RedemptionService, "confirm_redemption", _confirm)

    client = TestClient(app)
    response = client.post(
        "/redemptions",
        json={"venue_id": str(VENUE_ID), "user_id": str(USER_ID)},
        headers=POS_HEADERS,
    )

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "VALIDATION_ERROR"


def test_confirm_redemption_token_errors(monkeypatch) -> None:
    monkeypatch.setattr(redemptions, "get_settings", lambda: pos_settings())
    client = TestClient(app)

    cases = [
        (TokenNotFoundError(), 404),
        (TokenExpiredError(), 410),
        (TokenAlreadyUsedError(), 409),
        (TokenNotValidatedError(), 409),
        (TokenUserMismatchError(), 409),
    ]
    for error, status_code in cases:

        async def _confirm(*, venue_id, user_id, token, drink_id, value, now_utc, _error=error):  # noqa: ARG001
            raise _error

        monkeypatch.setattr(redemptions.RedemptionService, "confirm_redemption", _confirm)
        response = client.post(
            "/redemptions",
            json={"venue_id": str(VENUE_ID), "user_id": str(USER_ID), "token": "raw-token"},
            headers=POS_HEADERS,
        )

        assert response.status_code == status_code
        assert response.json()["detail"]["code"] == error.code
