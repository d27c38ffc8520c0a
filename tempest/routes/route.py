"""
Route model and great-circle geometry.

Routes are ordered waypoint sequences; insertion order is the sail order.
Distances are nautical miles on a spherical Earth (haversine).
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

logger = logging.getLogger(__name__)

EARTH_RADIUS_NM = 3440.065


@dataclass(frozen=True)
class Coordinate:
    """A position in decimal degrees."""
    lat: float
    lon: float

    def __post_init__(self):
        if not (math.isfinite(self.lat) and math.isfinite(self.lon)):
            raise ValueError(f"Non-finite coordinate ({self.lat}, {self.lon})")
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude {self.lat} outside [-90, 90]")
        if not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"Longitude {self.lon} outside [-180, 180]")

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lon)


@dataclass
class RouteLeg:
    """A leg between two waypoints."""
    index: int
    from_wp: Coordinate
    to_wp: Coordinate
    distance_nm: float
    bearing_deg: float


@dataclass
class Route:
    """A named route with ordered waypoints."""
    id: str
    name: str
    waypoints: List[Coordinate]
    origin: str = ""
    destination: str = ""
    description: str = field(default="", repr=False)

    @property
    def legs(self) -> List[RouteLeg]:
        """Calculate legs between consecutive waypoints."""
        legs = []
        for i in range(len(self.waypoints) - 1):
            wp1 = self.waypoints[i]
            wp2 = self.waypoints[i + 1]
            dist = haversine_distance(wp1.lat, wp1.lon, wp2.lat, wp2.lon)
            bearing = calculate_bearing(wp1.lat, wp1.lon, wp2.lat, wp2.lon)
            legs.append(RouteLeg(i, wp1, wp2, dist, bearing))
        return legs

    @property
    def leg_count(self) -> int:
        return max(len(self.waypoints) - 1, 0)

    @property
    def total_distance_nm(self) -> float:
        """Total route distance in nautical miles."""
        return sum(leg.distance_nm for leg in self.legs)


def _check_finite(*values: float) -> None:
    for v in values:
        if not math.isfinite(v):
            raise ValueError(f"Non-finite coordinate value: {v}")


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate great circle distance between two points.

    Args:
        lat1, lon1: First point in degrees
        lat2, lon2: Second point in degrees

    Returns:
        Distance in nautical miles (0 for identical points)

    Raises:
        ValueError: If any input is NaN or infinite
    """
    _check_finite(lat1, lon1, lat2, lon2)

    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2)
    # Rounding can push a marginally above 1 for antipodal points
    a = min(max(a, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_NM * c


def calculate_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate initial bearing from point 1 to point 2.

    Identical points have no direction; 0.0 is returned for them.

    Args:
        lat1, lon1: First point in degrees
        lat2, lon2: Second point in degrees

    Returns:
        Bearing in degrees [0, 360)
    """
    _check_finite(lat1, lon1, lat2, lon2)

    if lat1 == lat2 and lon1 == lon2:
        return 0.0

    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlon = math.radians(lon2 - lon1)

    x = math.sin(dlon) * math.cos(lat2_rad)
    y = (math.cos(lat1_rad) * math.sin(lat2_rad) -
         math.sin(lat1_rad) * math.cos(lat2_rad) * math.cos(dlon))

    bearing = math.degrees(math.atan2(x, y))
    return normalize_bearing(bearing)


def normalize_bearing(bearing_deg: float) -> float:
    """Fold any angle into [0, 360)."""
    result = bearing_deg % 360.0
    # -1e-15 % 360 rounds to 360.0
    return 0.0 if result >= 360.0 else result


def distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in nautical miles."""
    return haversine_distance(a.lat, a.lon, b.lat, b.lon)


def bearing(a: Coordinate, b: Coordinate) -> float:
    """Initial bearing from a to b in degrees."""
    return calculate_bearing(a.lat, a.lon, b.lat, b.lon)


def create_route_from_waypoints(
    waypoints: Sequence[Tuple[float, float]],
    name: str = "Custom Route",
    route_id: str = "custom",
    origin: str = "",
    destination: str = "",
) -> Route:
    """
    Create a Route from a list of (lat, lon) tuples.

    Args:
        waypoints: List of (lat, lon) tuples
        name: Route name
        route_id: Route identifier
        origin: Origin port label
        destination: Destination port label

    Returns:
        Route object
    """
    wps = [Coordinate(lat=float(lat), lon=float(lon)) for lat, lon in waypoints]
    return Route(id=route_id, name=name, waypoints=wps, origin=origin, destination=destination)
