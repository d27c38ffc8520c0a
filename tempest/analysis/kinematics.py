"""
Speed-over-ground models.

Two interchangeable strategies compose speed through water (STW) with
current and wind:

- AlongCourseSOG: STW plus the current component projected onto the course.
  Following current adds fully, head current subtracts fully, beam current
  contributes nothing.
- VectorSumSOG: magnitude of the 2-D sum of STW (along course), a wind drift
  term of 10% of wind speed acting downwind, and the current vector.

An analysis uses exactly one model for every leg. Results from the two
models are not comparable with each other.

Direction conventions:
- Current direction is where the current flows TO.
- Wind direction is meteorological, where the wind blows FROM.
"""

import logging
import math
from typing import Dict, Type

import numpy as np

from tempest.data.weather import WeatherObservation

logger = logging.getLogger(__name__)

DEFAULT_MIN_SOG_KTS = 1.0
WIND_DRIFT_FACTOR = 0.1


def along_course_sog(
    stw_kts: float,
    current_speed_kts: float,
    current_dir_deg: float,
    course_deg: float,
) -> float:
    """
    Unclamped SOG from the along-course current projection.

    Args:
        stw_kts: Speed through water in knots
        current_speed_kts: Current speed in knots
        current_dir_deg: Current direction (flowing to) in degrees
        course_deg: Course over ground in degrees

    Returns:
        Raw speed over ground in knots (may be below zero)
    """
    angle_diff = math.radians(current_dir_deg - course_deg)
    return stw_kts + current_speed_kts * math.cos(angle_diff)


def vector_sum_sog(
    stw_kts: float,
    wind_speed_kts: float,
    wind_dir_deg: float,
    current_speed_kts: float,
    current_dir_deg: float,
    course_deg: float,
) -> float:
    """
    Unclamped SOG from a full 2-D vector sum in the course frame.

    The course axis is y; angles are measured relative to the course.

    Returns:
        Raw speed over ground in knots (never negative)
    """
    stw_vec = np.array([0.0, stw_kts])

    # Wind from wind_dir pushes the hull towards wind_dir + 180
    drift_rad = np.radians(wind_dir_deg + 180.0 - course_deg)
    drift = WIND_DRIFT_FACTOR * wind_speed_kts
    wind_vec = np.array([drift * np.sin(drift_rad), drift * np.cos(drift_rad)])

    current_rad = np.radians(current_dir_deg - course_deg)
    current_vec = np.array([
        current_speed_kts * np.sin(current_rad),
        current_speed_kts * np.cos(current_rad),
    ])

    ground = stw_vec + wind_vec + current_vec
    return float(np.hypot(ground[0], ground[1]))


def speed_over_ground(
    stw_kts: float,
    current_speed_kts: float,
    current_dir_deg: float,
    course_deg: float,
    min_sog_kts: float = DEFAULT_MIN_SOG_KTS,
) -> float:
    """Along-course SOG clamped to the floor."""
    raw = along_course_sog(stw_kts, current_speed_kts, current_dir_deg, course_deg)
    return max(raw, min_sog_kts)


class SOGModel:
    """
    Base class for SOG strategies.

    Subclasses implement raw_sog; sog applies the floor that keeps
    leg durations finite.
    """

    name = "base"

    def __init__(self, min_sog_kts: float = DEFAULT_MIN_SOG_KTS):
        if min_sog_kts < DEFAULT_MIN_SOG_KTS:
            raise ValueError(f"SOG floor must be at least {DEFAULT_MIN_SOG_KTS} kn, got {min_sog_kts}")
        self.min_sog_kts = min_sog_kts

    def raw_sog(self, stw_kts: float, course_deg: float, observation: WeatherObservation) -> float:
        raise NotImplementedError

    def sog(self, stw_kts: float, course_deg: float, observation: WeatherObservation) -> float:
        raw = self.raw_sog(stw_kts, course_deg, observation)
        if raw < self.min_sog_kts:
            logger.debug(f"SOG {raw:.2f} kn below floor, clamped to {self.min_sog_kts} kn")
            return self.min_sog_kts
        return raw

    def __repr__(self) -> str:
        return f"{type(self).__name__}(min_sog_kts={self.min_sog_kts})"


class AlongCourseSOG(SOGModel):
    name = "along_course"

    def raw_sog(self, stw_kts, course_deg, observation):
        return along_course_sog(
            stw_kts,
            observation.current_speed_kts,
            observation.current_dir_deg,
            course_deg,
        )


class VectorSumSOG(SOGModel):
    name = "vector_sum"

    def raw_sog(self, stw_kts, course_deg, observation):
        return vector_sum_sog(
            stw_kts,
            observation.wind_speed_kts,
            observation.wind_dir_deg,
            observation.current_speed_kts,
            observation.current_dir_deg,
            course_deg,
        )


SOG_MODELS: Dict[str, Type[SOGModel]] = {
    AlongCourseSOG.name: AlongCourseSOG,
    VectorSumSOG.name: VectorSumSOG,
}


def create_sog_model(name: str, min_sog_kts: float = DEFAULT_MIN_SOG_KTS) -> SOGModel:
    """Instantiate a SOG strategy by name."""
    try:
        model_cls = SOG_MODELS[name]
    except KeyError:
        raise ValueError(f"Unknown SOG model '{name}', expected one of {sorted(SOG_MODELS)}")
    return model_cls(min_sog_kts=min_sog_kts)
