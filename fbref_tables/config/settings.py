import logging
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fbref_tables.models.enums import FailurePolicy


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Source Configuration
    base_url: str = Field(
        "https://fbref.com/en/comps/{source_id}/",
        description="Page URL pattern; {source_id} is replaced per league.",
    )
    user_agent: str = Field(
        "fbref-tables/0.1 (league comparison notebook)",
        description="User-Agent header sent with every request.",
    )

    # Request Settings
    min_request_interval: float = Field(
        3.0,  # FBref asks for no more than ~20 requests a minute
        ge=0,
        description="Minimum seconds between two requests to the same host.",
    )
    request_timeout: float = Field(
        30.0, gt=0, description="HTTP timeout in seconds."
    )

    # Build Settings
    failure_policy: FailurePolicy = Field(
        FailurePolicy.ABORT,
        description="What a failed league does to the build: abort it or skip the league.",
    )
    include_commented_tables: bool = Field(
        False, description="Also extract tables hidden inside HTML comments."
    )
    output_dir: Path = Field(
        Path("data"), description="Directory the output CSV files are written to."
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )
    log_file: Optional[Path] = Field(
        None, description="Optional log file path; console only when unset."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_prefix="FBREF_",
        env_file=".env",
        env_file_encoding="utf-8",
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
