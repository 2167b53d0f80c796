from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = Field(default="dev", alias="APP_ENV")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    enable_openapi_docs: bool = Field(default=True, alias="ENABLE_OPENAPI_DOCS")

    internal_api_token: str = Field(
        default="dev_internal_token_change_me",
        alias="INTERNAL_API_TOKEN",
    )
    internal_api_allowlist: str = Field(
        default="127.0.0.1/32,::1/128",
        alias="INTERNAL_API_ALLOWLIST",
    )
    internal_api_trusted_proxies: str = Field(default="", alias="INTERNAL_API_TRUSTED_PROXIES")
    pos_api_key: str = Field(default="", alias="POS_API_KEY")

    identity_provider_url: str = Field(default="", alias="IDENTITY_PROVIDER_URL")
    identity_provider_api_key: str = Field(default="", alias="IDENTITY_PROVIDER_API_KEY")
    identity_timeout_seconds: float = Field(default=5.0, alias="IDENTITY_TIMEOUT_SECONDS")

    notifications_webhook_url: str = Field(default="", alias="NOTIFICATIONS_WEBHOOK_URL")
    notifications_timeout_seconds: float = Field(default=5.0, alias="NOTIFICATIONS_TIMEOUT_SECONDS")

    database_url: str = Field(alias="DATABASE_URL")
    db_command_timeout_seconds: float = Field(default=10.0, alias="DB_COMMAND_TIMEOUT_SECONDS")
    redis_url: str = Field(alias="REDIS_URL")

    celery_broker_url: str = Field(alias="CELERY_BROKER_URL")
    celery_result_backend: str = Field(alias="CELERY_RESULT_BACKEND")

    default_venue_timezone: str = Field(default="Europe/Budapest", alias="DEFAULT_VENUE_TIMEZONE")
    qr_token_ttl_seconds: int = Field(default=120, alias="QR_TOKEN_TTL_SECONDS")
    void_staff_window_hours: int = Field(default=24, alias="VOID_STAFF_WINDOW_HOURS")
    void_rate_limit_max: int = Field(default=10, alias="VOID_RATE_LIMIT_MAX")
    void_rate_limit_window_seconds: int = Field(default=60, alias="VOID_RATE_LIMIT_WINDOW_SECONDS")
    cap_status_warn_pct: float = Field(default=70.0, alias="CAP_STATUS_WARN_PCT")
    cap_status_critical_pct: float = Field(default=90.0, alias="CAP_STATUS_CRITICAL_PCT")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
