"""
Tempest API Pydantic schemas.

Re-exports all schema classes:
    from api.schemas import Position, VoyageAnalysisRequest, ...
"""

# Common
from .common import Position, ErrorResponse  # noqa: F401

# Routes
from .route import RouteSummary, RouteDetail  # noqa: F401

# Weather
from .weather import WeatherObservationModel, RouteWeatherResponse  # noqa: F401

# Vessel
from .vessel import VesselModel, VesselSpecsInput  # noqa: F401

# Voyage
from .voyage import (  # noqa: F401
    LaycanWindowModel,
    VoyageAnalysisRequest,
    RouteEcho,
    PerformanceModel,
    LaycanComplianceModel,
    WeatherImpactModel,
    LegWeatherModel,
    LegAnalysisModel,
    AdvisoryModel,
    InsightModel,
    VoyageAnalysisResponse,
)
