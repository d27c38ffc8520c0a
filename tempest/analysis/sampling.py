"""
Weather sampling along a route.

Weather is fetched for a sparse subset of waypoints and spread over the
denser leg sequence by proportional index, so long routes need neither one
fetch per leg nor a re-query per leg.
"""

import math
from typing import List, Sequence, TypeVar

T = TypeVar('T')


def sample_index(leg_index: int, leg_count: int, sample_count: int) -> int:
    """
    Index of the weather sample that covers a leg.

    floor(leg_index / leg_count * sample_count), clamped to the last sample.

    Args:
        leg_index: Zero-based leg index
        leg_count: Number of legs being analysed
        sample_count: Number of available weather samples

    Returns:
        Sample index in [0, sample_count - 1]
    """
    if sample_count < 1:
        raise ValueError("At least one weather sample is required")
    if leg_count < 1:
        raise ValueError("At least one leg is required")
    if not 0 <= leg_index < leg_count:
        raise ValueError(f"Leg index {leg_index} outside [0, {leg_count})")

    index = math.floor(leg_index / leg_count * sample_count)
    return min(index, sample_count - 1)


def select_sample_points(waypoints: Sequence[T], stride: int, max_samples: int) -> List[T]:
    """
    Every `stride`-th waypoint starting at the first, at most `max_samples`.
    """
    if stride < 1 or max_samples < 1:
        raise ValueError("stride and max_samples must be positive")
    return list(waypoints[::stride][:max_samples])
