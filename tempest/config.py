"""
TEMPEST Configuration Module.

Centralized engine configuration using environment variables.
Supports .env files for local development.

Usage:
    from tempest.config import settings

    print(settings.weather_cache_ttl_s)
    print(settings.sog_model)
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
import logging

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


SOG_MODELS = ("along_course", "vector_sum")


def get_bool(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")


def get_float(key: str, default: float) -> float:
    """Get float from environment variable."""
    try:
        return float(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default


def get_int(key: str, default: int) -> int:
    """Get int from environment variable."""
    try:
        return int(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default


@dataclass
class Settings:
    """Engine settings loaded from environment."""

    # OpenWeather Configuration
    openweather_api_key: Optional[str] = field(default_factory=lambda: os.getenv("OPENWEATHER_API_KEY"))
    openweather_api_url: str = field(
        default_factory=lambda: os.getenv(
            "OPENWEATHER_API_URL", "https://api.openweathermap.org/data/2.5/weather"
        )
    )
    weather_timeout_s: float = field(default_factory=lambda: get_float("WEATHER_TIMEOUT_S", 10.0))
    weather_retry_attempts: int = field(default_factory=lambda: get_int("WEATHER_RETRY_ATTEMPTS", 2))

    # Observation cache
    weather_cache_ttl_s: int = field(default_factory=lambda: get_int("WEATHER_CACHE_TTL_S", 600))
    weather_cache_max_size: int = field(default_factory=lambda: get_int("WEATHER_CACHE_MAX_SIZE", 500))

    # Waypoint sampling
    weather_sample_stride: int = field(default_factory=lambda: get_int("WEATHER_SAMPLE_STRIDE", 8))
    weather_max_samples: int = field(default_factory=lambda: get_int("WEATHER_MAX_SAMPLES", 10))
    route_weather_sample_stride: int = field(
        default_factory=lambda: get_int("ROUTE_WEATHER_SAMPLE_STRIDE", 5)
    )
    route_weather_max_samples: int = field(
        default_factory=lambda: get_int("ROUTE_WEATHER_MAX_SAMPLES", 12)
    )

    # Analysis
    analysis_max_legs: int = field(default_factory=lambda: get_int("ANALYSIS_MAX_LEGS", 50))
    min_sog_kts: float = field(default_factory=lambda: get_float("MIN_SOG_KTS", 1.0))
    sog_model: str = field(default_factory=lambda: os.getenv("SOG_MODEL", "along_course"))
    allow_default_weather: bool = field(default_factory=lambda: get_bool("ALLOW_DEFAULT_WEATHER", False))

    # Gemini insight generator
    gemini_api_key: Optional[str] = field(default_factory=lambda: os.getenv("GEMINI_API_KEY"))
    gemini_api_url: str = field(
        default_factory=lambda: os.getenv(
            "GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
    )
    gemini_model: str = field(default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-1.5-flash-latest"))
    insight_timeout_s: float = field(default_factory=lambda: get_float("INSIGHT_TIMEOUT_S", 15.0))

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.min_sog_kts < 1.0:
            logging.warning(
                f"MIN_SOG_KTS {self.min_sog_kts} below 1 knot, using 1.0"
            )
            self.min_sog_kts = 1.0

        if self.sog_model not in SOG_MODELS:
            logging.warning(
                f"Unknown SOG_MODEL '{self.sog_model}', expected one of {SOG_MODELS}; "
                f"using along_course"
            )
            self.sog_model = "along_course"

        if self.weather_sample_stride < 1:
            self.weather_sample_stride = 1
        if self.route_weather_sample_stride < 1:
            self.route_weather_sample_stride = 1
        if self.weather_max_samples < 1:
            self.weather_max_samples = 1
        if self.route_weather_max_samples < 1:
            self.route_weather_max_samples = 1
        if self.analysis_max_legs < 0:
            self.analysis_max_legs = 0

        if not self.openweather_api_key:
            logging.info(
                "OPENWEATHER_API_KEY not set, weather observations will be synthesized"
            )

    @property
    def max_legs(self) -> Optional[int]:
        """Leg cap for analysis, None when unlimited."""
        return self.analysis_max_legs or None


# Singleton instance
settings = Settings()


# Convenience function for testing
def get_settings() -> Settings:
    """Get the settings instance (useful for dependency injection)."""
    return settings
