"""Application settings and configuration."""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STOCKTRACKER_",
        extra="ignore",
    )

    app_name: str = "StockTracker"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # Holdings store (read-only from this process)
    database_url: str = "sqlite:///./stocktracker.db"

    # Price source: "yahoo" for live quotes, "stub" for offline development
    price_provider: str = "yahoo"
    # Exchange suffix appended to bare tickers before querying, e.g. ".AX"
    price_symbol_suffix: str = ""
    price_fetch_timeout_seconds: float = 10.0

    # Price cache
    price_cache_ttl_seconds: int = 900

    # Background refresh loop
    price_refresh_enabled: bool = True
    price_refresh_initial_delay_seconds: float = 10.0
    price_refresh_interval_seconds: float = 900.0

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log_level to an uppercase Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"log_level must be one of {valid}, got {v!r}")
        return v.upper()

    @field_validator("price_provider", mode="before")
    @classmethod
    def validate_price_provider(cls, v: str) -> str:
        valid = {"yahoo", "stub"}
        if v.lower() not in valid:
            raise ValueError(f"price_provider must be one of {valid}, got {v!r}")
        return v.lower()

    @field_validator("price_symbol_suffix", mode="before")
    @classmethod
    def normalize_suffix(cls, v: str) -> str:
        return (v or "").strip().upper()


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
