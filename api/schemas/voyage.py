"""Voyage analysis API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import Position
from .vessel import VesselModel, VesselSpecsInput


class LaycanWindowModel(BaseModel):
    """Arrival window; either bound may be omitted."""
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class VoyageAnalysisRequest(BaseModel):
    """
    Request for a voyage analysis.

    The route is either a catalog `route_id` or explicit `waypoints`
    (route_id wins when both are given).
    """
    route_id: Optional[str] = Field(None, alias="routeId")
    waypoints: Optional[List[Position]] = None
    route_name: str = "Custom Route"

    vessel_id: Optional[str] = None
    vessel_specs: Optional[VesselSpecsInput] = Field(None, alias="vesselSpecs")
    stw_kts: Optional[float] = Field(None, description="Speed through water, defaults to service speed")

    laycan_window: Optional[LaycanWindowModel] = Field(None, alias="laycanWindow")
    departure_time: Optional[datetime] = None
    include_insights: Optional[bool] = None

    model_config = ConfigDict(populate_by_name=True)


class RouteEcho(BaseModel):
    id: str
    name: str
    origin: str
    destination: str
    waypoint_count: int
    total_distance_nm: int  # Full route, rounded


class PerformanceModel(BaseModel):
    total_distance_nm: float  # Analysed legs only
    total_duration_hours: float
    average_sog_kts: float
    total_fuel_tons: float
    estimated_cost_usd: int
    eta: datetime


class LaycanComplianceModel(BaseModel):
    status: str  # UNSPECIFIED | COMPLIANT | EARLY | LATE
    eta: datetime
    risk_hours: int
    laycan_window: Optional[LaycanWindowModel] = None


class WeatherImpactModel(BaseModel):
    average_wind_speed_kts: float
    average_wave_height_m: float
    weather_factor: float
    samples_used: int


class LegWeatherModel(BaseModel):
    wind_speed_kts: float
    wave_height_m: float
    current_speed_kts: float
    temperature_c: float


class LegAnalysisModel(BaseModel):
    """Result for a single leg."""
    leg_index: int
    distance_nm: float
    bearing_deg: int
    stw_kts: float
    sog_kts: float
    weather_factor: float
    fuel_rate_tpd: float
    fuel_tons: float
    duration_hours: float
    weather: LegWeatherModel


class AdvisoryModel(BaseModel):
    type: str
    description: str
    impact: str


class InsightModel(BaseModel):
    headline: str
    points: List[str]


class VoyageAnalysisResponse(BaseModel):
    """Complete voyage analysis response."""
    route: RouteEcho
    vessel: VesselModel
    sog_model: str
    departure_time: datetime

    performance: PerformanceModel
    laycan_compliance: LaycanComplianceModel
    weather_impact: WeatherImpactModel

    legs_analyzed: int
    legs_total: int
    legs: List[LegAnalysisModel]  # First response_leg_limit legs

    optimization_suggestions: List[AdvisoryModel]
    insights: List[InsightModel] = []
