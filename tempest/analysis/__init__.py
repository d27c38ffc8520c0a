"""Voyage analysis: vessel fuel model, SOG, leg decomposition, laycan and insights."""

from .vessel_model import (
    DEFAULT_VESSEL,
    VESSEL_CATALOG,
    VesselProfile,
    fuel_burn_rate,
    leg_fuel_tons,
    vessel_from_specs,
    weather_resistance,
)
from .kinematics import (
    AlongCourseSOG,
    SOGModel,
    VectorSumSOG,
    create_sog_model,
    speed_over_ground,
)
from .sampling import sample_index, select_sample_points
from .laycan import LaycanCompliance, LaycanStatus, LaycanWindow, evaluate_laycan
from .voyage import (
    LegDecomposer,
    LegResult,
    VoyageAnalysis,
    VoyageAnalyzer,
    VoyageTotals,
    WeatherImpact,
    aggregate_totals,
    decompose_legs,
    summarize_weather_impact,
)
from .advisories import Advisory, optimization_suggestions
from .insights import (
    FALLBACK_INSIGHT,
    GeminiInsightGenerator,
    Insight,
    InsightGenerator,
    InsightRequest,
    StaticInsightGenerator,
    build_insight_request,
    generate_insights,
    parse_insights,
)

__all__ = [
    "DEFAULT_VESSEL",
    "VESSEL_CATALOG",
    "VesselProfile",
    "fuel_burn_rate",
    "leg_fuel_tons",
    "vessel_from_specs",
    "weather_resistance",
    "AlongCourseSOG",
    "SOGModel",
    "VectorSumSOG",
    "create_sog_model",
    "speed_over_ground",
    "sample_index",
    "select_sample_points",
    "LaycanCompliance",
    "LaycanStatus",
    "LaycanWindow",
    "evaluate_laycan",
    "LegDecomposer",
    "LegResult",
    "VoyageAnalysis",
    "VoyageAnalyzer",
    "VoyageTotals",
    "WeatherImpact",
    "aggregate_totals",
    "decompose_legs",
    "summarize_weather_impact",
    "Advisory",
    "optimization_suggestions",
    "FALLBACK_INSIGHT",
    "GeminiInsightGenerator",
    "Insight",
    "InsightGenerator",
    "InsightRequest",
    "StaticInsightGenerator",
    "build_insight_request",
    "generate_insights",
    "parse_insights",
]
