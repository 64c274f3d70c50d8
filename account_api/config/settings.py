# account_api/config/settings.py

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "account-api"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False
    version: str = "0.1.0"

    # --- Security ---
    jwt_secret: str = Field(..., min_length=32)
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "account-api"
    jwt_audience: str = "account-api-users"
    jwt_realm: str = "account-api"
    jwt_access_expiration_minutes: int = 60
    jwt_refresh_expiration_minutes: int = 60 * 24
    password_min_length: int = 6
    bcrypt_rounds: int = Field(12, ge=4, le=31)

    # --- Database ---
    database_url: str

    # --- Redis ---
    redis_url: str
    profile_cache_ttl_seconds: int = 300

    # --- Events ---
    event_bus_workers: int = Field(4, ge=1)

    # --- HTTP ---
    rate_limit_enabled: bool = True
    rate_limit_backend: Literal["memory", "redis"] = "memory"
    rate_limit_requests: int = 1000
    rate_limit_window_seconds: int = 1
    cors_allow_origins: List[str] = ["*"]

    # --- Observability ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
