"""
HTTP-layer settings for the Tempest API (pydantic-settings).

Only what the web surface needs lives here: bind address, CORS, response
shaping. Weather, analysis and insight settings belong to tempest.config.
"""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """API settings, read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 1

    environment: str = "development"
    log_level: str = "info"
    debug: bool = False

    # Browser clients (comma separated)
    cors_origins: str = "http://localhost:3000,http://localhost:5173"
    cors_credentials: bool = True

    # Voyage analysis responses
    response_leg_limit: int = 20  # legs echoed per response; totals cover all analysed legs
    include_insights_default: bool = True

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """Process-wide API settings."""
    api_settings = Settings()
    if api_settings.is_production and "localhost" in api_settings.cors_origins.lower():
        raise ValueError("CORS_ORIGINS must not include localhost in production")
    return api_settings


settings = get_settings()
