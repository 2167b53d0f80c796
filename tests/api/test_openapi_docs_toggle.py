from __future__ import annotations

from types import SimpleNamespace

from fastapi.testclient import TestClient

from app import main as app_main


def _settings(*, enable_openapi_docs: bool) -> SimpleNamespace:
    return SimpleNamespace(
        log_level="INFO",
        enable_openapi_docs=enable_openapi_docs,
    )


def test_openapi_docs_enabled(monkeypatch) -> None:
    monkeypatch.setattr(app_main, "get_settings", lambda: _settings(enable_openapi_docs=True))
    client = TestClient(app_main.create_app())

    docs_response = client.get("/docs")
    openapi_response = client.get("/openapi.json")

    assert docs_response.status_code == 200
    assert client.get("/redoc").status_code == 200
    assert openapi_response.status_code == 200
    paths = set(openapi_response.json()["paths"])
    assert {
        "/free-drink-stats",
        "/qr-tokens",
        "/validate-qr",
        "/redemptions",
        "/void-redemption",
        "/detect-milestones",
        "/loyalty/pending-alerts",
    } <= paths


def test_openapi_docs_disabled(monkeypatch) -> None:
    monkeypatch.setattr(app_main, "get_settings", lambda: _settings(enable_openapi_docs=False))
    client = TestClient(app_main.create_app())

    assert client.get("/docs").status_code == 404
    assert client.get("/redoc").status_code == 404
    assert client.get("/openapi.json").status_code == 404
