"""
Tests for speed-over-ground models.

Covers:
- Along-course projection: following, head and beam current
- The 1 kn floor is returned exactly when raw SOG falls below it
- Vector-sum model with wind drift and current
- Strategy factory and floor validation
"""

import pytest

from tempest.analysis.kinematics import (
    AlongCourseSOG,
    VectorSumSOG,
    along_course_sog,
    create_sog_model,
    speed_over_ground,
    vector_sum_sog,
)
from tempest.data.weather import WeatherObservation


class TestAlongCourse:

    def test_following_current_adds(self):
        assert along_course_sog(12.0, 2.0, 90.0, 90.0) == pytest.approx(14.0)

    def test_head_current_subtracts(self):
        assert along_course_sog(12.0, 2.0, 270.0, 90.0) == pytest.approx(10.0)

    def test_beam_current_contributes_nothing(self):
        assert along_course_sog(12.0, 2.0, 0.0, 90.0) == pytest.approx(12.0)

    def test_wraparound_angles(self):
        """Current at 350 on a course of 10 is 20 degrees off the bow."""
        assert along_course_sog(10.0, 1.0, 350.0, 10.0) == pytest.approx(10.0 + 0.9396926, rel=1e-6)


class TestFloor:

    def test_floor_is_exact(self):
        """Raw SOG of -3 kn is clamped to exactly 1 kn."""
        assert speed_over_ground(2.0, 5.0, 180.0, 0.0) == 1.0

    def test_above_floor_untouched(self):
        assert speed_over_ground(12.0, 0.5, 0.0, 0.0) == pytest.approx(12.5)

    def test_model_applies_floor(self):
        model = AlongCourseSOG()
        obs = WeatherObservation(current_speed_kts=20.0, current_dir_deg=180.0)
        assert model.raw_sog(5.0, 0.0, obs) == pytest.approx(-15.0)
        assert model.sog(5.0, 0.0, obs) == 1.0

    def test_custom_floor(self):
        model = AlongCourseSOG(min_sog_kts=3.0)
        obs = WeatherObservation(current_speed_kts=20.0, current_dir_deg=180.0)
        assert model.sog(5.0, 0.0, obs) == 3.0

    def test_floor_below_one_rejected(self):
        with pytest.raises(ValueError):
            AlongCourseSOG(min_sog_kts=0.5)


class TestVectorSum:

    def test_calm_equals_stw(self):
        assert vector_sum_sog(12.0, 0.0, 0.0, 0.0, 0.0, 45.0) == pytest.approx(12.0)

    def test_head_wind_drift(self):
        """20 kn from dead ahead drifts the ship 2 kn astern."""
        assert vector_sum_sog(10.0, 20.0, 0.0, 0.0, 0.0, 0.0) == pytest.approx(8.0)

    def test_following_current(self):
        assert vector_sum_sog(10.0, 0.0, 0.0, 2.0, 90.0, 90.0) == pytest.approx(12.0)

    def test_beam_current_adds_in_quadrature(self):
        assert vector_sum_sog(12.0, 0.0, 0.0, 5.0, 90.0, 0.0) == pytest.approx(13.0)

    def test_model_uses_wind_and_current(self):
        obs = WeatherObservation(wind_speed_kts=20.0, wind_dir_deg=180.0)
        assert VectorSumSOG().sog(10.0, 0.0, obs) == pytest.approx(12.0)


class TestFactory:

    @pytest.mark.parametrize("name, cls", [
        ("along_course", AlongCourseSOG),
        ("vector_sum", VectorSumSOG),
    ])
    def test_known_models(self, name, cls):
        model = create_sog_model(name, min_sog_kts=2.0)
        assert isinstance(model, cls)
        assert model.name == name
        assert model.min_sog_kts == 2.0

    def test_unknown_model(self):
        with pytest.raises(ValueError, match="Unknown SOG model"):
            create_sog_model("great_circle")
