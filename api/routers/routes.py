"""
Route catalog API router.

Lists the built-in routes and returns their geometry with planning figures.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from api.schemas import Position, RouteDetail, RouteSummary
from tempest.exceptions import InvalidRoute
from tempest.routes import PLANNING_SPEED_KTS, estimated_duration_hours, get_route, list_routes
from tempest.routes.route import Route

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/routes", tags=["Routes"])


def _summary(route: Route) -> dict:
    return {
        "id": route.id,
        "name": route.name,
        "origin": route.origin,
        "destination": route.destination,
        "waypoint_count": len(route.waypoints),
    }


@router.get("", response_model=List[RouteSummary])
async def get_routes():
    """List the built-in routes."""
    return [_summary(route) for route in list_routes()]


@router.get("/{route_id}", response_model=RouteDetail)
async def get_route_detail(route_id: str):
    """
    Route geometry with total distance (whole nm) and estimated duration
    at the planning speed.
    """
    try:
        route = get_route(route_id)
    except InvalidRoute as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {
        **_summary(route),
        "description": route.description,
        "waypoints": [Position(lat=wp.lat, lon=wp.lon) for wp in route.waypoints],
        "leg_count": route.leg_count,
        "total_distance_nm": round(route.total_distance_nm),
        "estimated_duration_hours": round(estimated_duration_hours(route), 1),
        "planning_speed_kts": PLANNING_SPEED_KTS,
    }
