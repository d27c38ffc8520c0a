"""
Shared pytest fixtures for Tempest tests.

Environment defaults are set at import time, before any tempest.* or api.*
module reads its settings, so no test ever calls a live weather or AI API.
"""

import os
from datetime import datetime, timezone
from typing import Iterable, Optional

import pytest
from fastapi.testclient import TestClient

# ---------------------------------------------------------------------------
# Section 1: Environment setup (before ANY tempest.* / api.* imports)
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "development")
os.environ["OPENWEATHER_API_KEY"] = ""
os.environ["GEMINI_API_KEY"] = ""
os.environ.setdefault("LOG_LEVEL", "WARNING")

from tempest.analysis.insights import Insight, InsightGenerator  # noqa: E402
from tempest.analysis.vessel_model import VesselProfile  # noqa: E402
from tempest.data.weather import WeatherObservation, WeatherProvider  # noqa: E402
from tempest.exceptions import WeatherFetchError  # noqa: E402
from tempest.routes import create_route_from_waypoints  # noqa: E402


# ---------------------------------------------------------------------------
# Section 2: Deterministic collaborators
# ---------------------------------------------------------------------------


class FakeWeatherProvider(WeatherProvider):
    """Returns a fixed observation; fails for listed latitudes."""

    name = "fake"

    def __init__(self, observation: WeatherObservation, fail_lats: Iterable[float] = (), fail_all: bool = False):
        self.observation = observation
        self.fail_lats = set(fail_lats)
        self.fail_all = fail_all
        self.calls = []

    def fetch(self, coordinate):
        self.calls.append(coordinate)
        if self.fail_all or coordinate.lat in self.fail_lats:
            raise WeatherFetchError(f"fake failure at {coordinate.lat}")
        return self.observation


class FakeInsightGenerator(InsightGenerator):
    """Returns canned insights and records the last request."""

    name = "fake"

    def __init__(self, insights=None, error: Optional[Exception] = None):
        self.insights = insights if insights is not None else [
            Insight(headline="Laycan on track", points=("ETA within window.",)),
        ]
        self.error = error
        self.last_request = None

    def generate(self, request):
        self.last_request = request
        if self.error is not None:
            raise self.error
        return self.insights


# ---------------------------------------------------------------------------
# Section 3: Domain fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def calm_observation():
    """No wind, no waves, no current."""
    return WeatherObservation(source="test")


@pytest.fixture
def stormy_observation():
    """Strong wind and high seas with a 1 kn current flowing north."""
    return WeatherObservation(
        wind_speed_kts=35.0,
        wind_dir_deg=270.0,
        wave_height_m=6.0,
        current_speed_kts=1.0,
        current_dir_deg=0.0,
        source="test",
    )


@pytest.fixture
def equator_route():
    """One degree of longitude along the equator."""
    return create_route_from_waypoints([(0.0, 0.0), (0.0, 1.0)], name="Equator Test")


@pytest.fixture
def long_route():
    """60 legs stepping east along the equator, 0.1 degrees each."""
    wps = [(0.0, round(i * 0.1, 1)) for i in range(61)]
    return create_route_from_waypoints(wps, name="Long Test Route")


@pytest.fixture
def test_vessel():
    return VesselProfile(
        name="Test Vessel",
        service_speed_kts=12.0,
        fuel_consumption_tpd=40.0,
        fuel_price_per_ton=500.0,
    )


@pytest.fixture
def departure():
    return datetime(2025, 3, 1, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fake_weather_factory():
    """Build FakeWeatherProvider instances."""
    return FakeWeatherProvider


@pytest.fixture
def fake_insights_factory():
    """Build FakeInsightGenerator instances."""
    return FakeInsightGenerator


# ---------------------------------------------------------------------------
# Section 4: API client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def weather_provider(calm_observation):
    return FakeWeatherProvider(calm_observation)


@pytest.fixture
def insight_generator():
    return FakeInsightGenerator()


@pytest.fixture
def client(weather_provider, insight_generator):
    """FastAPI TestClient with fake weather and insight collaborators."""
    from api.main import app
    from api.state import get_app_state

    state = get_app_state()
    state.reset()
    state.configure(weather_provider=weather_provider, insight_generator=insight_generator)
    with TestClient(app) as test_client:
        yield test_client
    state.reset()
