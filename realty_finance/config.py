"""
Application configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from pydantic_settings import BaseSettings


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App settings
    app_name: str = "Realty Finance"
    debug: bool = False
    log_level: str = "INFO"
    app_env: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Simulation limits
    max_term_months: int = 420

    # ROI timeline comparison horizons
    timeline_step_months: int = 6
    timeline_max_months: int = 60

    # Reference annual rates in percent (Caixa, Jan 2026)
    suggested_rate_min: float = 10.49
    suggested_rate_max: float = 11.49
    suggested_rate_default: float = 10.99

    # Analytics / audit events
    audit_enabled: bool = True

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
