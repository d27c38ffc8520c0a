"""Route model, geodesy and the built-in route catalog."""

from .route import (
    Coordinate,
    Route,
    RouteLeg,
    bearing,
    calculate_bearing,
    create_route_from_waypoints,
    distance,
    haversine_distance,
    normalize_bearing,
)
from .catalog import PLANNING_SPEED_KTS, ROUTES, estimated_duration_hours, get_route, list_routes

__all__ = [
    "Coordinate",
    "Route",
    "RouteLeg",
    "bearing",
    "calculate_bearing",
    "create_route_from_waypoints",
    "distance",
    "haversine_distance",
    "normalize_bearing",
    "PLANNING_SPEED_KTS",
    "ROUTES",
    "estimated_duration_hours",
    "get_route",
    "list_routes",
]
