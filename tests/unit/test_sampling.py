"""
Tests for weather sample selection and leg-to-sample mapping.
"""

import pytest

from tempest.analysis.sampling import sample_index, select_sample_points


class TestSampleIndex:

    def test_first_leg_uses_first_sample(self):
        assert sample_index(0, 50, 10) == 0

    def test_proportional_mapping(self):
        assert sample_index(5, 50, 10) == 1
        assert sample_index(24, 50, 10) == 4
        assert sample_index(25, 50, 10) == 5
        assert sample_index(49, 50, 10) == 9

    def test_more_samples_than_legs(self):
        assert [sample_index(i, 2, 10) for i in range(2)] == [0, 5]

    def test_single_sample(self):
        assert {sample_index(i, 30, 1) for i in range(30)} == {0}

    def test_every_index_in_range(self):
        for legs in (1, 3, 7, 50, 85):
            for samples in (1, 2, 10, 12):
                for i in range(legs):
                    assert 0 <= sample_index(i, legs, samples) <= samples - 1

    def test_monotonic(self):
        indices = [sample_index(i, 37, 9) for i in range(37)]
        assert indices == sorted(indices)

    @pytest.mark.parametrize("args", [(0, 10, 0), (0, 0, 5), (10, 10, 5), (-1, 10, 5)])
    def test_invalid_arguments(self, args):
        with pytest.raises(ValueError):
            sample_index(*args)


class TestSelectSamplePoints:

    def test_analysis_sampling(self):
        waypoints = list(range(86))
        assert select_sample_points(waypoints, 8, 10) == [0, 8, 16, 24, 32, 40, 48, 56, 64, 72]

    def test_route_weather_sampling(self):
        waypoints = list(range(40))
        assert select_sample_points(waypoints, 5, 12) == [0, 5, 10, 15, 20, 25, 30, 35]

    def test_short_route_keeps_first_point(self):
        assert select_sample_points(["a", "b"], 8, 10) == ["a"]

    def test_invalid_stride(self):
        with pytest.raises(ValueError):
            select_sample_points([1, 2, 3], 0, 10)
