"""
Weather API router.

Point lookups and a sampled weather overview along catalog routes, served
through the application's cached weather provider.
"""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Path

from api.schemas import RouteWeatherResponse, WeatherObservationModel
from api.state import get_app_state
from tempest.analysis.sampling import select_sample_points
from tempest.data.weather import fetch_route_weather
from tempest.exceptions import InvalidRoute, NoWeatherData, WeatherFetchError
from tempest.resilience import CircuitOpenError
from tempest.routes import Coordinate, get_route

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/weather", tags=["Weather"])


@router.get("/point/{lat}/{lon}", response_model=WeatherObservationModel)
async def get_point_weather(
    lat: float = Path(..., ge=-90, le=90),
    lon: float = Path(..., ge=-180, le=180),
):
    """Current conditions at a single position."""
    provider = get_app_state().weather_provider
    try:
        observation = await asyncio.to_thread(provider.fetch, Coordinate(lat=lat, lon=lon))
    except (WeatherFetchError, CircuitOpenError) as e:
        logger.warning(f"Point weather unavailable at ({lat:.2f}, {lon:.2f}): {e}")
        raise HTTPException(status_code=503, detail=f"Weather data unavailable: {e}")
    return observation.to_dict()


@router.get("/route/{route_id}", response_model=RouteWeatherResponse)
async def get_route_weather(route_id: str):
    """
    Conditions at sampled waypoints of a catalog route.

    Sample points are fetched concurrently; failed points are omitted.
    Returns 503 when no point returned data.
    """
    try:
        route = get_route(route_id)
    except InvalidRoute as e:
        raise HTTPException(status_code=404, detail=str(e))

    state = get_app_state()
    engine = state.engine_settings
    points = select_sample_points(
        route.waypoints,
        engine.route_weather_sample_stride,
        engine.route_weather_max_samples,
    )

    try:
        observations = await fetch_route_weather(state.weather_provider, points)
    except NoWeatherData as e:
        raise HTTPException(status_code=503, detail=str(e))

    return {
        "route_id": route.id,
        "route_name": route.name,
        "sample_count": len(points),
        "observation_count": len(observations),
        "observations": [obs.to_dict() for obs in observations],
    }
