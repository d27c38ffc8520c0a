"""Route catalog API schemas."""

from typing import List

from pydantic import BaseModel

from .common import Position


class RouteSummary(BaseModel):
    id: str
    name: str
    origin: str
    destination: str
    waypoint_count: int


class RouteDetail(RouteSummary):
    """A catalog route with geometry and planning figures."""
    description: str = ""
    waypoints: List[Position]
    leg_count: int
    total_distance_nm: int  # Rounded to whole nautical miles
    estimated_duration_hours: float  # At planning speed
    planning_speed_kts: float
