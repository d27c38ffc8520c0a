"""
Voyage analysis API router.

Runs a full voyage analysis: sampled weather along the route, per-leg SOG,
duration and fuel, voyage totals, laycan compliance, rule-based suggestions
and optional AI insights.
"""

import asyncio
import logging
import time as _time
from typing import List

from fastapi import APIRouter, HTTPException

from api.config import settings
from api.schemas import VoyageAnalysisRequest, VoyageAnalysisResponse
from api.state import get_app_state
from tempest.analysis.advisories import Advisory, optimization_suggestions
from tempest.analysis.insights import Insight, generate_insights
from tempest.analysis.laycan import LaycanWindow
from tempest.analysis.vessel_model import DEFAULT_VESSEL, VESSEL_CATALOG, VesselProfile, vessel_from_specs
from tempest.analysis.voyage import VoyageAnalysis
from tempest.exceptions import (
    DegenerateVoyage,
    InvalidRoute,
    InvalidVesselProfile,
    NoWeatherData,
    VoyageAnalysisError,
)
from tempest.routes import create_route_from_waypoints, get_route
from tempest.routes.route import Route

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Voyage"])


def http_error(error: VoyageAnalysisError) -> HTTPException:
    """Map an analysis failure to an HTTP status."""
    if isinstance(error, InvalidRoute) and error.route_id is not None:
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, (InvalidRoute, InvalidVesselProfile)):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, NoWeatherData):
        return HTTPException(status_code=503, detail=str(error))
    if isinstance(error, DegenerateVoyage):
        return HTTPException(status_code=422, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def resolve_route(request: VoyageAnalysisRequest) -> Route:
    if request.route_id is not None:
        return get_route(request.route_id)
    if request.waypoints is None:
        raise InvalidRoute("Either route_id or waypoints is required")
    return create_route_from_waypoints(
        [(wp.lat, wp.lon) for wp in request.waypoints],
        name=request.route_name,
    )


def resolve_vessel(request: VoyageAnalysisRequest) -> VesselProfile:
    base = DEFAULT_VESSEL
    if request.vessel_id is not None:
        matches = [v for v in VESSEL_CATALOG if v.vessel_id == request.vessel_id]
        if not matches:
            raise InvalidVesselProfile(f"Vessel not found: {request.vessel_id}")
        base = matches[0]

    specs = request.vessel_specs.model_dump(exclude_none=True) if request.vessel_specs else {}
    return vessel_from_specs(specs, base=base)


def resolve_laycan(request: VoyageAnalysisRequest):
    if request.laycan_window is None:
        return None
    try:
        return LaycanWindow(start=request.laycan_window.start, end=request.laycan_window.end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def build_response(
    analysis: VoyageAnalysis,
    suggestions: List[Advisory],
    insights: List[Insight],
    leg_limit: int,
) -> dict:
    """Rounded response body for an analysis."""
    route = analysis.route
    totals = analysis.totals
    impact = analysis.weather_impact
    window = analysis.laycan.window

    return {
        "route": {
            "id": route.id,
            "name": route.name,
            "origin": route.origin,
            "destination": route.destination,
            "waypoint_count": len(route.waypoints),
            "total_distance_nm": round(analysis.route_distance_nm),
        },
        "vessel": analysis.vessel.to_dict(),
        "sog_model": analysis.sog_model,
        "departure_time": analysis.departure_time,
        "performance": {
            "total_distance_nm": round(totals.total_distance_nm, 1),
            "total_duration_hours": round(totals.total_duration_hours, 1),
            "average_sog_kts": round(totals.average_sog_kts, 1),
            "total_fuel_tons": round(totals.total_fuel_tons, 1),
            "estimated_cost_usd": round(totals.estimated_cost_usd),
            "eta": analysis.eta,
        },
        "laycan_compliance": {
            "status": analysis.laycan.status.value,
            "eta": analysis.eta,
            "risk_hours": analysis.laycan.risk_hours,
            "laycan_window": {"start": window.start, "end": window.end} if window else None,
        },
        "weather_impact": {
            "average_wind_speed_kts": round(impact.average_wind_speed_kts, 1),
            "average_wave_height_m": round(impact.average_wave_height_m, 1),
            "weather_factor": round(impact.average_weather_factor, 2),
            "samples_used": impact.samples_used,
        },
        "legs_analyzed": analysis.legs_analyzed,
        "legs_total": analysis.legs_total,
        "legs": [
            {
                "leg_index": leg.leg_index,
                "distance_nm": round(leg.distance_nm, 1),
                "bearing_deg": round(leg.bearing_deg) % 360,
                "stw_kts": round(leg.stw_kts, 1),
                "sog_kts": round(leg.sog_kts, 1),
                "weather_factor": round(leg.weather_factor, 2),
                "fuel_rate_tpd": round(leg.fuel_rate_tpd, 1),
                "fuel_tons": round(leg.fuel_tons, 2),
                "duration_hours": round(leg.duration_hours, 1),
                "weather": {
                    "wind_speed_kts": round(leg.weather.wind_speed_kts, 1),
                    "wave_height_m": round(leg.weather.wave_height_m, 1),
                    "current_speed_kts": round(leg.weather.current_speed_kts, 1),
                    "temperature_c": round(leg.weather.temperature_c, 1),
                },
            }
            for leg in analysis.legs[:leg_limit]
        ],
        "optimization_suggestions": [s.to_dict() for s in suggestions],
        "insights": [i.to_dict() for i in insights],
    }


@router.post("/api/voyage/analyze", response_model=VoyageAnalysisResponse)
async def analyze_voyage(request: VoyageAnalysisRequest):
    """
    Analyse a voyage along a catalog route or explicit waypoints.

    Errors:
        - 404: unknown route id
        - 400: fewer than 2 waypoints, bad vessel specs or laycan window
        - 503: no weather data could be fetched
        - 422: zero-duration voyage
    """
    state = get_app_state()
    t_start = _time.monotonic()

    try:
        route = resolve_route(request)
        vessel = resolve_vessel(request)
        laycan = resolve_laycan(request)

        logger.info(
            f"Voyage analysis started: '{route.name}', {len(route.waypoints)} waypoints, "
            f"vessel '{vessel.name}' at {request.stw_kts or vessel.service_speed_kts} kts"
        )
        analysis = await state.analyzer.analyze_route(
            route,
            vessel,
            state.weather_provider,
            laycan=laycan,
            departure_time=request.departure_time,
            stw_kts=request.stw_kts,
        )
    except VoyageAnalysisError as e:
        logger.warning(f"Voyage analysis rejected: {type(e).__name__}: {e}")
        raise http_error(e)

    suggestions = optimization_suggestions(analysis)

    include_insights = (
        settings.include_insights_default if request.include_insights is None
        else request.include_insights
    )
    insights = []
    if include_insights:
        insights = await asyncio.to_thread(generate_insights, state.insight_generator, analysis)

    logger.info(f"Voyage analysis completed in {_time.monotonic() - t_start:.2f}s")
    return build_response(analysis, suggestions, insights, settings.response_leg_limit)
