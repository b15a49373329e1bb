# app/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables (or a local `.env` file)
    at runtime and cover:
    - DB connection
    - Internal API key for scheduler/import endpoints
    - Bearer token verification for dashboard users
    - Attendance reporting thresholds
    """

    APP_NAME: str = "Zone Attendance Monitor"
    APP_ENV: str = Field("local", description="Environment name: local/test/dev/stage/prod")
    LOG_LEVEL: str = Field("INFO", description="Root log level for the service.")

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./zone_attendance.db",
        description="SQLAlchemy-compatible async database URL",
    )

    INTERNAL_API_KEY: str | None = Field(
        default=None,
        description="API key required for hitting /internal endpoints",
    )

    # --- Bearer token verification (tokens are issued by the auth service) ---
    JWT_SECRET_KEY: str | None = Field(
        default=None,
        description="Shared secret used to verify dashboard bearer tokens.",
    )
    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="Signing algorithm expected on bearer tokens.",
    )

    # --- Attendance reporting ---
    AT_RISK_CONSECUTIVE_LEAVES: int = Field(
        default=3,
        ge=1,
        description="Current leave streak at which a member is listed as at risk.",
    )
    LATEST_LEAVES_LIMIT: int = Field(
        default=10,
        ge=0,
        description="Number of most recent leave records shown on the dashboard.",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
