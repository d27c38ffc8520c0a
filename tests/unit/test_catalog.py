"""Tests for the built-in route catalog."""

import pytest

from tempest.exceptions import InvalidRoute
from tempest.routes import PLANNING_SPEED_KTS, ROUTES, estimated_duration_hours, get_route, list_routes


class TestCatalog:

    def test_route_ids(self):
        assert [r.id for r in list_routes()] == ["1", "2"]

    def test_gopalpur_route(self):
        route = get_route("1")
        assert route.name == "Gopalpur to New Harbour"
        assert route.origin == "Gopalpur"
        assert len(route.waypoints) == 86

    def test_rotterdam_route(self):
        route = get_route("2")
        assert route.destination == "Singapore"
        assert len(route.waypoints) == 40
        assert 6000 < route.total_distance_nm < 11000

    def test_integer_id_accepted(self):
        assert get_route(2) is ROUTES["2"]

    def test_unknown_route(self):
        with pytest.raises(InvalidRoute) as exc_info:
            get_route("99")
        assert exc_info.value.route_id == "99"

    def test_every_route_sailable(self):
        for route in list_routes():
            assert route.leg_count >= 1
            assert route.total_distance_nm > 0


class TestEstimatedDuration:

    def test_planning_speed(self):
        route = get_route("2")
        hours = estimated_duration_hours(route)
        assert hours == pytest.approx(route.total_distance_nm / PLANNING_SPEED_KTS)

    def test_custom_speed(self, equator_route):
        assert estimated_duration_hours(equator_route, 6.0) == pytest.approx(60.04 / 6.0, rel=1e-3)

    def test_rejects_zero_speed(self, equator_route):
        with pytest.raises(ValueError):
            estimated_duration_hours(equator_route, 0)
