import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hockeyplots.models.enums import IndexPolicy, LedgerBackend


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Ledger Configuration
    ledger_backend: LedgerBackend = Field(
        LedgerBackend.SQLITE, description="Where games and scores are persisted."
    )
    sqlite_path: str = Field(
        "data/hockeyplots.db", description="Path of the SQLite ledger file."
    )
    supabase_url: Optional[str] = Field(
        None, description="URL for the Supabase project (supabase backend only)."
    )
    supabase_key: Optional[str] = Field(
        None, description="Anon or service key for the Supabase project."
    )

    # Feed Configuration
    feed_base_url: str = Field(
        "https://api-web.nhle.com/v1", description="Base URL of the schedule feed."
    )
    season: str = Field("20232024", description="Season code, e.g. 20232024.")
    feed_timeout_seconds: float = Field(30.0, gt=0)
    feed_max_attempts: int = Field(
        4, ge=1, description="Total attempts per request, including retries."
    )
    feed_max_concurrency: int = Field(
        8, ge=1, description="Team schedules fetched at the same time."
    )

    # Derivation Settings
    baseline_points_per_game: float = Field(
        1.0,
        ge=0,
        le=2,
        description="Expected points per game subtracted from each result.",
    )
    index_policy: IndexPolicy = Field(
        IndexPolicy.COMPACT,
        description="How unscored games affect the x-axis of a series.",
    )

    # Dashboard Settings
    refresh_interval_seconds: float = Field(
        0.0, ge=0, description="Automatic refresh period; 0 refreshes on start only."
    )
    frame_interval_seconds: float = Field(0.25, gt=0)

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HOCKEYPLOTS_",
        extra="ignore",
        case_sensitive=False,
    )


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
