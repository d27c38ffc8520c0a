"""
Weather observations and providers.

The engine consumes observations through the WeatherProvider interface:
    provider.fetch(coordinate) -> WeatherObservation

Providers:
- OpenWeatherProvider: live wind/met data over HTTP. OpenWeather has no
  ocean data, so wave height and currents are synthesized.
- SyntheticWeatherProvider: plausible random conditions for development/demo.
- CachedWeatherProvider: wraps any provider with an ObservationCache.
"""

import asyncio
import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

import numpy as np
import requests

from tempest.data.cache import ObservationCache, coordinate_key
from tempest.exceptions import NoWeatherData, WeatherFetchError
from tempest.resilience import CircuitBreaker, CircuitOpenError, register_circuit_breaker, with_retry
from tempest.routes.route import Coordinate, normalize_bearing

logger = logging.getLogger(__name__)

MS_TO_KTS = 1.94384
METERS_PER_NM = 1852.0

# Substituted field-by-field for missing or invalid values
DEFAULT_WIND_SPEED_KTS = 10.0
DEFAULT_WAVE_HEIGHT_M = 2.0
DEFAULT_CURRENT_SPEED_KTS = 0.5
DEFAULT_CURRENT_DIR_DEG = 180.0


@dataclass(frozen=True)
class WeatherObservation:
    """Conditions at one location. Never mutated by the engine."""
    coordinate: Optional[Coordinate] = None
    timestamp: Optional[datetime] = None

    wind_speed_kts: float = 0.0
    wind_dir_deg: float = 0.0  # Meteorological: direction wind blows FROM
    wave_height_m: float = 0.0
    swell_dir_deg: float = 0.0
    current_speed_kts: float = 0.0
    current_dir_deg: float = 0.0  # Direction current flows TO

    # Informational only
    temperature_c: float = 20.0
    pressure_hpa: float = 1013.0
    humidity_pct: float = 50.0
    visibility_nm: float = 10.0
    description: str = ""
    source: str = "unknown"

    def to_dict(self) -> Dict:
        return {
            'lat': self.coordinate.lat if self.coordinate else None,
            'lon': self.coordinate.lon if self.coordinate else None,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
            'wind_speed_kts': self.wind_speed_kts,
            'wind_dir_deg': self.wind_dir_deg,
            'wave_height_m': self.wave_height_m,
            'swell_dir_deg': self.swell_dir_deg,
            'current_speed_kts': self.current_speed_kts,
            'current_dir_deg': self.current_dir_deg,
            'temperature_c': self.temperature_c,
            'pressure_hpa': self.pressure_hpa,
            'humidity_pct': self.humidity_pct,
            'visibility_nm': self.visibility_nm,
            'description': self.description,
            'source': self.source,
        }


def default_observation(
    coordinate: Optional[Coordinate] = None,
    timestamp: Optional[datetime] = None,
) -> WeatherObservation:
    """Moderate conditions used when no observation at all is available."""
    return WeatherObservation(
        coordinate=coordinate,
        timestamp=timestamp or datetime.now(timezone.utc),
        wind_speed_kts=DEFAULT_WIND_SPEED_KTS,
        wave_height_m=DEFAULT_WAVE_HEIGHT_M,
        current_speed_kts=DEFAULT_CURRENT_SPEED_KTS,
        current_dir_deg=DEFAULT_CURRENT_DIR_DEG,
        description="Default conditions",
        source="default",
    )


def _valid_magnitude(value) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and value >= 0


def _valid_angle(value) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


def sanitize_observation(obs: WeatherObservation) -> WeatherObservation:
    """
    Replace unusable fields with defaults so one bad sample cannot fail a voyage.

    Magnitudes must be finite and non-negative; directions must be finite
    and are folded into [0, 360).
    """
    fixes = {}
    if not _valid_magnitude(obs.wind_speed_kts):
        fixes['wind_speed_kts'] = DEFAULT_WIND_SPEED_KTS
    if not _valid_magnitude(obs.wave_height_m):
        fixes['wave_height_m'] = DEFAULT_WAVE_HEIGHT_M
    if not _valid_magnitude(obs.current_speed_kts):
        fixes['current_speed_kts'] = DEFAULT_CURRENT_SPEED_KTS

    if fixes:
        logger.warning(f"Replaced invalid weather fields {sorted(fixes)} with defaults")

    wind_dir = obs.wind_dir_deg if _valid_angle(obs.wind_dir_deg) else 0.0
    current_dir = obs.current_dir_deg if _valid_angle(obs.current_dir_deg) else DEFAULT_CURRENT_DIR_DEG
    fixes['wind_dir_deg'] = normalize_bearing(wind_dir)
    fixes['current_dir_deg'] = normalize_bearing(current_dir)

    return replace(obs, **fixes)


class WeatherProvider(ABC):
    """Source of point weather observations."""

    name = "provider"

    @abstractmethod
    def fetch(self, coordinate: Coordinate) -> WeatherObservation:
        """
        Get conditions at a coordinate.

        Raises:
            WeatherFetchError: If no observation can be produced
        """


class SyntheticWeatherProvider(WeatherProvider):
    """
    Generates plausible random conditions for development/demo.

    Use this when no weather API is configured, or as the fallback of a
    live provider.
    """

    name = "synthetic"

    def __init__(self, seed: Optional[int] = None):
        self._rng = np.random.default_rng(seed)

    def fetch(self, coordinate: Coordinate) -> WeatherObservation:
        rng = self._rng
        return WeatherObservation(
            coordinate=coordinate,
            timestamp=datetime.now(timezone.utc),
            wind_speed_kts=float(rng.uniform(5.0, 20.0)),
            wind_dir_deg=float(rng.uniform(0.0, 360.0)),
            wave_height_m=float(rng.uniform(1.0, 4.0)),
            swell_dir_deg=float(rng.uniform(0.0, 360.0)),
            current_speed_kts=float(rng.uniform(0.0, 2.0)),
            current_dir_deg=float(rng.uniform(0.0, 360.0)),
            temperature_c=float(rng.uniform(20.0, 35.0)),
            pressure_hpa=float(rng.uniform(1003.0, 1023.0)),
            humidity_pct=float(rng.uniform(50.0, 80.0)),
            visibility_nm=10.0,
            description="Simulated data",
            source=self.name,
        )


openweather_breaker = register_circuit_breaker(
    CircuitBreaker(name="openweather_api", failure_threshold=5, recovery_timeout=60)
)


class OpenWeatherProvider(WeatherProvider):
    """
    Current conditions from the OpenWeather API.

    Wind and meteorological fields come from the API; wave height and
    currents are synthesized. When the call fails (after retries) or no
    API key is configured, a fully synthetic observation is returned unless
    synthesize_on_failure is False, in which case WeatherFetchError is raised.
    """

    name = "openweather"

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = "https://api.openweathermap.org/data/2.5/weather",
        timeout_s: float = 10.0,
        retry_attempts: int = 2,
        synthesize_on_failure: bool = True,
        synthetic: Optional[SyntheticWeatherProvider] = None,
        session: Optional[requests.Session] = None,
        breaker: CircuitBreaker = openweather_breaker,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout_s = timeout_s
        self.synthesize_on_failure = synthesize_on_failure
        self.synthetic = synthetic or SyntheticWeatherProvider()
        self.session = session or requests.Session()
        self._get = breaker(
            with_retry(
                max_attempts=max(retry_attempts, 1),
                exceptions=(requests.RequestException,),
            )(self._http_get)
        )

    def _http_get(self, coordinate: Coordinate) -> Dict:
        response = self.session.get(
            self.api_url,
            params={
                'lat': coordinate.lat,
                'lon': coordinate.lon,
                'appid': self.api_key,
                'units': 'metric',
            },
            timeout=self.timeout_s,
        )
        response.raise_for_status()
        return response.json()

    def fetch(self, coordinate: Coordinate) -> WeatherObservation:
        if not self.api_key:
            return self._fallback(coordinate, "no OpenWeather API key configured")

        logger.debug(f"Fetching OpenWeather conditions at ({coordinate.lat:.2f}, {coordinate.lon:.2f})")
        try:
            data = self._get(coordinate)
            return self._parse(coordinate, data)
        except CircuitOpenError as e:
            return self._fallback(coordinate, str(e))
        except (requests.RequestException, ValueError, TypeError, AttributeError, KeyError, IndexError) as e:
            return self._fallback(coordinate, f"OpenWeather request failed: {e}")

    def _fallback(self, coordinate: Coordinate, reason: str) -> WeatherObservation:
        if not self.synthesize_on_failure:
            raise WeatherFetchError(reason)
        logger.warning(f"{reason}; using simulated weather at ({coordinate.lat:.2f}, {coordinate.lon:.2f})")
        return self.synthetic.fetch(coordinate)

    def _parse(self, coordinate: Coordinate, data: Dict) -> WeatherObservation:
        """Map an OpenWeather current-conditions payload to an observation."""
        if not isinstance(data, dict):
            raise ValueError("OpenWeather payload is not an object")

        # Ocean fields and any missing wind fields come from a synthetic draw
        filler = self.synthetic.fetch(coordinate)
        wind = data.get('wind') or {}
        main = data.get('main') or {}
        conditions = data.get('weather')
        summary = conditions[0] if isinstance(conditions, list) and conditions else {}

        wind_speed_ms = wind.get('speed')
        wind_speed_kts = (
            float(wind_speed_ms) * MS_TO_KTS if wind_speed_ms is not None
            else filler.wind_speed_kts
        )
        wind_dir = wind.get('deg')
        wind_dir_deg = float(wind_dir) if wind_dir is not None else filler.wind_dir_deg

        visibility_m = data.get('visibility')
        visibility_nm = float(visibility_m) / METERS_PER_NM if visibility_m else 10.0

        return WeatherObservation(
            coordinate=coordinate,
            timestamp=datetime.now(timezone.utc),
            wind_speed_kts=wind_speed_kts,
            wind_dir_deg=wind_dir_deg,
            wave_height_m=filler.wave_height_m,
            swell_dir_deg=normalize_bearing(wind_dir_deg + 90.0),
            current_speed_kts=filler.current_speed_kts,
            current_dir_deg=filler.current_dir_deg,
            temperature_c=float(main.get('temp', 20.0)),
            pressure_hpa=float(main.get('pressure', 1013.0)),
            humidity_pct=float(main.get('humidity', 50.0)),
            visibility_nm=visibility_nm,
            description=(summary or {}).get('description', 'Clear'),
            source=self.name,
        )


class CachedWeatherProvider(WeatherProvider):
    """Serves repeat lookups near the same coordinate from an ObservationCache."""

    def __init__(self, provider: WeatherProvider, cache: ObservationCache):
        self.provider = provider
        self.cache = cache
        self.name = f"cached:{provider.name}"

    def fetch(self, coordinate: Coordinate) -> WeatherObservation:
        key = coordinate_key(coordinate)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Weather cache hit for {key}")
            return cached

        observation = self.provider.fetch(coordinate)
        self.cache.set(key, observation)
        return observation


async def fetch_route_weather(
    provider: WeatherProvider,
    coordinates: Sequence[Coordinate],
) -> List[WeatherObservation]:
    """
    Fetch observations for sampled waypoints concurrently.

    Every fetch is issued at once on worker threads; failures are logged and
    dropped. Successful observations keep the order of `coordinates`.

    Raises:
        NoWeatherData: If no fetch succeeded
    """
    if not coordinates:
        raise NoWeatherData("No coordinates to sample weather for")

    logger.info(f"Fetching weather for {len(coordinates)} sample points via {provider.name}")
    results = await asyncio.gather(
        *(asyncio.to_thread(provider.fetch, coord) for coord in coordinates),
        return_exceptions=True,
    )

    observations = []
    for coord, result in zip(coordinates, results):
        if isinstance(result, BaseException):
            logger.warning(f"Weather fetch failed at ({coord.lat:.2f}, {coord.lon:.2f}): {result}")
            continue
        observations.append(result)

    if not observations:
        raise NoWeatherData(f"All {len(coordinates)} weather fetches failed")

    logger.info(f"Retrieved weather for {len(observations)}/{len(coordinates)} points")
    return observations
