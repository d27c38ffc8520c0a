"""
Exception hierarchy for voyage analysis.

Only failures that make a whole analysis impossible are raised. Per-leg
anomalies (a bad weather sample, an odd bearing) are absorbed where they
occur and never surface here.
"""


class VoyageAnalysisError(Exception):
    """Base class for analysis failures."""
    pass


class InvalidRoute(VoyageAnalysisError):
    """Route has fewer than two waypoints or the identifier is unknown."""

    def __init__(self, message: str, route_id: str = None):
        super().__init__(message)
        self.route_id = route_id


class InvalidVesselProfile(VoyageAnalysisError):
    """Vessel service speed or fuel rate is not positive."""
    pass


class NoWeatherData(VoyageAnalysisError):
    """Every weather fetch failed, so no leg can be computed."""
    pass


class DegenerateVoyage(VoyageAnalysisError):
    """Aggregate math is undefined (zero total duration or empty sample set)."""
    pass


class InsightParseError(ValueError):
    """Insight generator returned output that is not a list of insights."""
    pass


class WeatherFetchError(Exception):
    """A single weather lookup failed; absorbed by route-level sampling."""
    pass


class InsightUnavailable(Exception):
    """Insight generator is not configured or could not be reached."""
    pass
