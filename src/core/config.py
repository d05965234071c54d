"""Configuration management for smart pantry."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings, read from the environment or a local .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    sqlite_db_path: str = Field(default="pantry.db", description="Path to the SQLite database file")

    # Observability (Logfire exports only when a token is present)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire write token")
    environment: str = Field(default="production", description="Deployment environment reported to Logfire")

    # Command interpreter
    default_expiry_days: int = Field(
        default=7, ge=1, description="Days until expiry when an utterance says nothing about expiration"
    )
    default_item_name: str = Field(
        default="Pantry item", min_length=1, description="Label used when no item name can be extracted"
    )

    # Listings
    default_list_limit: int = Field(default=50, ge=1, description="Default number of items returned by the pantry API")
    voice_list_limit: int = Field(default=10, ge=1, description="Number of items read out by the voice assistant")
    expiring_soon_days: int = Field(
        default=3, ge=0, description="Items expiring within this many days trigger a voice warning"
    )


class Constants:
    """Fixed values shared across the app."""

    HTTP_OK: int = 200
    HTTP_BAD_REQUEST: int = 400
    HTTP_NOT_FOUND: int = 404
    HTTP_UNPROCESSABLE: int = 422
    HTTP_SERVER_ERROR: int = 500
    HTTP_SERVICE_UNAVAILABLE: int = 503

    # "In N days" stays a warning up to a week out
    EXPIRY_WARNING_WINDOW_DAYS: int = 7

    # Upper bound for a single listing, also used for delete snapshots
    MAX_LIST_LIMIT: int = 500

    # Widest "expiring within N days" window a listing accepts
    MAX_EXPIRING_WINDOW_DAYS: int = 3650


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


settings = get_settings()
constants = Constants()
