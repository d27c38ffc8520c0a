"""Tests for rule-based optimisation suggestions."""

from datetime import timedelta

import pytest

from tempest.analysis import LaycanWindow, VoyageAnalyzer
from tempest.analysis.advisories import optimization_suggestions, routing_advisory, speed_advisory


@pytest.fixture
def analyzer():
    return VoyageAnalyzer()


def analyse(analyzer, route, vessel, observation, departure, laycan=None):
    return analyzer.analyze(route, vessel, [observation], laycan=laycan, departure_time=departure)


class TestSpeedAdvisory:

    def test_calm_weather_is_optimal(self, analyzer, equator_route, test_vessel, calm_observation, departure):
        analysis = analyse(analyzer, equator_route, test_vessel, calm_observation, departure)
        advisory = speed_advisory(analysis)
        assert advisory.type == "SPEED_ADJUSTMENT"
        assert advisory.description == "Current speed appears optimal for conditions"
        assert advisory.impact == "Maintaining current efficiency"

    def test_heavy_weather_suggests_slowing(self, analyzer, equator_route, test_vessel, stormy_observation, departure):
        analysis = analyse(analyzer, equator_route, test_vessel, stormy_observation, departure)
        advisory = speed_advisory(analysis)
        assert advisory.description == "Consider reducing speed to 11 knots to save fuel in adverse weather"
        assert advisory.impact == "Potential fuel savings: 15-25%"


class TestRoutingAdvisory:

    def test_favorable(self, analyzer, equator_route, test_vessel, calm_observation, departure):
        analysis = analyse(analyzer, equator_route, test_vessel, calm_observation, departure)
        advisory = routing_advisory(analysis)
        assert advisory.type == "WEATHER_ROUTING"
        assert advisory.description == "Weather conditions favorable for current route"
        assert advisory.impact == "Maintain schedule reliability"

    def test_high_wind_and_late(self, analyzer, equator_route, test_vessel, stormy_observation, departure):
        window = LaycanWindow(start=departure, end=departure + timedelta(hours=2))
        analysis = analyse(analyzer, equator_route, test_vessel, stormy_observation, departure, laycan=window)
        advisory = routing_advisory(analysis)
        assert advisory.description == "High winds detected - consider slight route deviation if possible"
        assert advisory.impact == "Could recover 2-4 hours"


def test_suggestions_order(analyzer, equator_route, test_vessel, calm_observation, departure):
    analysis = analyse(analyzer, equator_route, test_vessel, calm_observation, departure)
    suggestions = optimization_suggestions(analysis)
    assert [s.type for s in suggestions] == ["SPEED_ADJUSTMENT", "WEATHER_ROUTING"]
    assert set(suggestions[0].to_dict()) == {"type", "description", "impact"}
