# app/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables at runtime.

    Used for:
    - DB connection
    - Google Calendar OAuth client credentials
    - Logging verbosity
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "CalendAI Availability"
    APP_ENV: str = Field("local", description="Environment name: local/dev/stage/prod")
    LOG_LEVEL: str = Field("INFO", description="Root log level for the service.")

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./calendai.db",
        description="SQLAlchemy-compatible database URL",
    )
    DB_NULL_POOL: bool = Field(
        False,
        description="Open a fresh connection per session instead of pooling.",
    )

    # --- Google Calendar (external busy source) ---
    GOOGLE_CLIENT_ID: str | None = Field(
        default=None,
        description="OAuth client id used to refresh hosts' Google Calendar tokens.",
    )
    GOOGLE_CLIENT_SECRET: str | None = Field(
        default=None,
        description="OAuth client secret paired with GOOGLE_CLIENT_ID.",
    )
    GOOGLE_TOKEN_URL: str = Field(
        "https://oauth2.googleapis.com/token",
        description="OAuth2 token endpoint used for refresh_token grants.",
    )
    GOOGLE_CALENDAR_BASE_URL: str = Field(
        "https://www.googleapis.com/calendar/v3",
        description="Base URL of the Google Calendar REST API.",
    )
    GOOGLE_TIMEOUT_SECONDS: float = Field(
        10.0,
        description="Network timeout applied to every Google API call.",
    )
    GOOGLE_TOKEN_REFRESH_MARGIN_SECONDS: int = Field(
        300,
        description=(
            "Access tokens expiring within this many seconds are refreshed "
            "before the calendar is queried."
        ),
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
