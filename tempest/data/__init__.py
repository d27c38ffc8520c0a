"""Weather providers and the observation cache."""

from .cache import ObservationCache, coordinate_key
from .weather import (
    CachedWeatherProvider,
    OpenWeatherProvider,
    SyntheticWeatherProvider,
    WeatherObservation,
    WeatherProvider,
    default_observation,
    fetch_route_weather,
    sanitize_observation,
)

__all__ = [
    'ObservationCache',
    'coordinate_key',
    'CachedWeatherProvider',
    'OpenWeatherProvider',
    'SyntheticWeatherProvider',
    'WeatherObservation',
    'WeatherProvider',
    'default_observation',
    'fetch_route_weather',
    'sanitize_observation',
]
