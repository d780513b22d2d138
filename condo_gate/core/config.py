"""
Core configuration module for the Condominium Gate access-control service.

Uses Pydantic Settings for environment-based configuration with validation.
Values are loaded from environment variables or a .env file.
"""

from functools import lru_cache
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(
        default="Condominium Gate",
        description="Name shown in API docs and report headers",
    )

    # Locale
    timezone: str = Field(
        default="America/Sao_Paulo",
        description="IANA timezone defining the condominium's calendar day",
    )
    export_timestamp_format: str = Field(
        default="%d/%m/%Y %H:%M:%S",
        description="strftime format of timestamps in CSV exports and reports",
    )
    report_date_format: str = Field(
        default="%d/%m/%Y",
        description="strftime format of the generation date in printed reports",
    )

    # Data
    seed_demo_data: bool = Field(
        default=True,
        description="Load demo operators, houses, people and events at startup",
    )

    # Sessions
    session_token_bytes: int = Field(
        default=32,
        ge=16,
        le=128,
        description="Entropy of generated session tokens, in bytes",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Application log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Server port",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {v}") from exc
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        """Timezone object for the configured identifier."""
        return ZoneInfo(self.timezone)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return not self.debug


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for the lifetime of the application.

    Returns:
        Settings: Application configuration instance.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()
