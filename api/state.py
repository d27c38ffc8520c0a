"""
Thread-safe state management for the Tempest API.

Holds the long-lived collaborators shared by all requests: the cached
weather provider, the insight generator and the voyage analyzer. Components
are built lazily from engine settings and can be swapped with configure() (tests
replace the weather provider and insight generator with fakes).
"""
import threading
import logging
from typing import Any, Dict, Optional
from datetime import datetime, timezone

from tempest.analysis.insights import GeminiInsightGenerator, InsightGenerator, StaticInsightGenerator
from tempest.analysis.voyage import VoyageAnalyzer
from tempest.config import Settings as EngineSettings, get_settings as get_engine_settings
from tempest.data.cache import ObservationCache
from tempest.data.weather import CachedWeatherProvider, OpenWeatherProvider, WeatherProvider

logger = logging.getLogger(__name__)


def build_weather_provider(engine: EngineSettings, cache: ObservationCache) -> WeatherProvider:
    """OpenWeather behind the observation cache."""
    live = OpenWeatherProvider(
        api_key=engine.openweather_api_key,
        api_url=engine.openweather_api_url,
        timeout_s=engine.weather_timeout_s,
        retry_attempts=engine.weather_retry_attempts,
    )
    return CachedWeatherProvider(live, cache)


def build_insight_generator(engine: EngineSettings) -> InsightGenerator:
    """Gemini when a key is configured, otherwise the static fallback."""
    if not engine.gemini_api_key:
        logger.info("GEMINI_API_KEY not set, AI insights disabled")
        return StaticInsightGenerator()
    return GeminiInsightGenerator(
        api_key=engine.gemini_api_key,
        api_url=engine.gemini_api_url,
        model=engine.gemini_model,
        timeout_s=engine.insight_timeout_s,
    )


class ApplicationState:
    """
    Singleton application state manager.

    Use get_app_state() to access the singleton instance.
    """

    _instance: Optional['ApplicationState'] = None
    _lock: threading.Lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                # Double-check locking
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize application state (only once)."""
        if self._initialized:
            return

        self._initialized = True
        self._components_lock = threading.RLock()
        self._engine: EngineSettings = get_engine_settings()
        self._cache: Optional[ObservationCache] = None
        self._weather_provider: Optional[WeatherProvider] = None
        self._insight_generator: Optional[InsightGenerator] = None
        self._analyzer: Optional[VoyageAnalyzer] = None
        self._startup_time = datetime.now(timezone.utc)

        logger.info("Application state initialized")

    @property
    def engine_settings(self) -> EngineSettings:
        return self._engine

    @property
    def weather_cache(self) -> ObservationCache:
        with self._components_lock:
            if self._cache is None:
                self._cache = ObservationCache(
                    max_size=self._engine.weather_cache_max_size,
                    ttl_seconds=self._engine.weather_cache_ttl_s,
                    name="weather",
                )
            return self._cache

    @property
    def weather_provider(self) -> WeatherProvider:
        """Get the weather provider (lazy initialization)."""
        with self._components_lock:
            if self._weather_provider is None:
                self._weather_provider = build_weather_provider(self._engine, self.weather_cache)
                logger.info(f"Weather provider initialized: {self._weather_provider.name}")
            return self._weather_provider

    @property
    def insight_generator(self) -> InsightGenerator:
        with self._components_lock:
            if self._insight_generator is None:
                self._insight_generator = build_insight_generator(self._engine)
            return self._insight_generator

    @property
    def analyzer(self) -> VoyageAnalyzer:
        with self._components_lock:
            if self._analyzer is None:
                self._analyzer = VoyageAnalyzer.from_settings(self._engine)
            return self._analyzer

    def configure(
        self,
        weather_provider: Optional[WeatherProvider] = None,
        insight_generator: Optional[InsightGenerator] = None,
        analyzer: Optional[VoyageAnalyzer] = None,
    ) -> None:
        """Replace components; those left as None keep their current value."""
        with self._components_lock:
            if weather_provider is not None:
                self._weather_provider = weather_provider
            if insight_generator is not None:
                self._insight_generator = insight_generator
            if analyzer is not None:
                self._analyzer = analyzer
            logger.info("Application components reconfigured")

    def reset(self) -> None:
        """Drop all components so they are rebuilt from settings on next use."""
        with self._components_lock:
            self._cache = None
            self._weather_provider = None
            self._insight_generator = None
            self._analyzer = None

    @property
    def uptime_seconds(self) -> float:
        return (datetime.now(timezone.utc) - self._startup_time).total_seconds()

    def health_check(self) -> Dict[str, Any]:
        """
        Component health summary.

        Returns:
            Dict with weather provider, insight generator and cache details
        """
        with self._components_lock:
            return {
                'weather_provider': self._weather_provider.name if self._weather_provider else 'not_initialized',
                'insight_generator': self._insight_generator.name if self._insight_generator else 'not_initialized',
                'weather_cache': self._cache.get_stats() if self._cache else None,
                'uptime_seconds': self.uptime_seconds,
            }


def get_app_state() -> ApplicationState:
    """
    Get the application state singleton.

    Returns:
        ApplicationState: The singleton application state instance
    """
    return ApplicationState()
