"""Weather-related API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class WeatherObservationModel(BaseModel):
    """Conditions at a point."""
    lat: Optional[float] = None
    lon: Optional[float] = None
    timestamp: Optional[datetime] = None
    wind_speed_kts: float
    wind_dir_deg: float  # Direction wind blows FROM
    wave_height_m: float
    swell_dir_deg: float
    current_speed_kts: float
    current_dir_deg: float  # Direction current flows TO
    temperature_c: float
    pressure_hpa: float
    humidity_pct: float
    visibility_nm: float
    description: str
    source: str


class RouteWeatherResponse(BaseModel):
    """Weather sampled along a catalog route."""
    route_id: str
    route_name: str
    sample_count: int  # Points requested
    observation_count: int  # Points that returned data
    observations: List[WeatherObservationModel]
