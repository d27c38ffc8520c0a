"""
Voyage analysis module.

Decomposes a route into legs, computes per-leg SOG, duration and fuel from
sampled weather, and aggregates the legs into voyage totals, ETA, laycan
compliance and a weather-impact summary.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from tempest.analysis.kinematics import AlongCourseSOG, SOGModel, create_sog_model
from tempest.analysis.laycan import LaycanCompliance, LaycanWindow, as_utc, evaluate_laycan
from tempest.analysis.sampling import sample_index, select_sample_points
from tempest.analysis.vessel_model import (
    VesselProfile,
    fuel_burn_rate,
    leg_fuel_tons,
    weather_resistance,
)
from tempest.data.weather import (
    WeatherObservation,
    WeatherProvider,
    default_observation,
    fetch_route_weather,
    sanitize_observation,
)
from tempest.exceptions import DegenerateVoyage, InvalidRoute, InvalidVesselProfile, NoWeatherData
from tempest.routes.route import Coordinate, Route

logger = logging.getLogger(__name__)

DEFAULT_MAX_LEGS = 50
DEFAULT_SAMPLE_STRIDE = 8
DEFAULT_MAX_SAMPLES = 10


@dataclass(frozen=True)
class LegResult:
    """Calculation result for a single leg."""
    leg_index: int
    from_wp: Coordinate
    to_wp: Coordinate

    # Leg geometry
    distance_nm: float
    bearing_deg: float

    # Weather sample driving this leg
    sample_index: int
    weather: WeatherObservation
    weather_factor: float

    # Speed and time
    stw_kts: float
    sog_kts: float  # Floored speed over ground
    duration_hours: float
    departure_time: datetime
    arrival_time: datetime

    # Fuel
    fuel_rate_tpd: float
    fuel_tons: float


@dataclass(frozen=True)
class VoyageTotals:
    """Aggregates over analysed legs."""
    total_distance_nm: float
    total_duration_hours: float
    total_fuel_tons: float
    estimated_cost_usd: float
    average_sog_kts: float


@dataclass(frozen=True)
class WeatherImpact:
    """Mean conditions over the weather samples actually used by legs."""
    average_wind_speed_kts: float
    average_wave_height_m: float
    average_weather_factor: float
    samples_used: int


@dataclass
class VoyageAnalysis:
    """Complete voyage analysis result."""
    route: Route
    vessel: VesselProfile
    stw_kts: float
    sog_model: str
    departure_time: datetime
    eta: datetime

    totals: VoyageTotals
    laycan: LaycanCompliance
    weather_impact: WeatherImpact

    legs: List[LegResult]
    legs_analyzed: int
    legs_total: int
    route_distance_nm: float  # Full route, including legs beyond the cap

    observations: List[WeatherObservation] = field(default_factory=list, repr=False)

    @property
    def is_capped(self) -> bool:
        return self.legs_analyzed < self.legs_total


def validate_route(route: Route) -> Route:
    """
    Raises:
        InvalidRoute: If the route has fewer than 2 waypoints
    """
    if len(route.waypoints) < 2:
        raise InvalidRoute(
            f"Route '{route.name}' needs at least 2 waypoints, got {len(route.waypoints)}"
        )
    return route


class LegDecomposer:
    """
    Turns a route plus a sparse weather sample set into per-leg results.

    Each leg is independent of the others; the only sequential state is the
    running clock used to stamp leg departure/arrival times.
    """

    def __init__(self, sog_model: Optional[SOGModel] = None, max_legs: Optional[int] = DEFAULT_MAX_LEGS):
        """
        Args:
            sog_model: Speed-over-ground strategy (along-course by default)
            max_legs: Cap on legs processed, None for no cap
        """
        if max_legs is not None and max_legs < 1:
            raise ValueError(f"max_legs must be positive or None, got {max_legs}")
        self.sog_model = sog_model or AlongCourseSOG()
        self.max_legs = max_legs

    def decompose(
        self,
        route: Route,
        vessel: VesselProfile,
        observations: Sequence[WeatherObservation],
        stw_kts: float,
        departure_time: datetime,
    ) -> Tuple[List[LegResult], int]:
        """
        Compute every analysed leg in waypoint order.

        Args:
            route: Route with at least 2 waypoints
            vessel: Validated vessel profile
            observations: Non-empty weather samples in route order
            stw_kts: Speed through water for every leg
            departure_time: Departure instant of the first leg

        Returns:
            Tuple of (leg results, total number of legs in the route)
        """
        validate_route(route)
        if not observations:
            raise NoWeatherData(f"No weather samples for route '{route.name}'")

        route_legs = route.legs
        legs_total = len(route_legs)
        if self.max_legs is not None and legs_total > self.max_legs:
            logger.info(f"Route '{route.name}' has {legs_total} legs, analysing first {self.max_legs}")
            route_legs = route_legs[:self.max_legs]
        leg_count = len(route_legs)
        sample_count = len(observations)

        results = []
        current_time = departure_time
        for leg in route_legs:
            idx = sample_index(leg.index, leg_count, sample_count)
            weather = observations[idx]

            weather_factor = weather_resistance(weather.wind_speed_kts, weather.wave_height_m)
            sog_kts = self.sog_model.sog(stw_kts, leg.bearing_deg, weather)
            duration_hours = leg.distance_nm / sog_kts

            rate = fuel_burn_rate(
                vessel.fuel_consumption_tpd,
                sog_kts,
                vessel.service_speed_kts,
                weather_factor,
            )
            arrival_time = current_time + timedelta(hours=duration_hours)

            results.append(LegResult(
                leg_index=leg.index,
                from_wp=leg.from_wp,
                to_wp=leg.to_wp,
                distance_nm=leg.distance_nm,
                bearing_deg=leg.bearing_deg,
                sample_index=idx,
                weather=weather,
                weather_factor=weather_factor,
                stw_kts=stw_kts,
                sog_kts=sog_kts,
                duration_hours=duration_hours,
                departure_time=current_time,
                arrival_time=arrival_time,
                fuel_rate_tpd=rate,
                fuel_tons=leg_fuel_tons(rate, duration_hours),
            ))
            current_time = arrival_time

        return results, legs_total


def decompose_legs(
    route: Route,
    vessel: VesselProfile,
    observations: Sequence[WeatherObservation],
    stw_kts: Optional[float] = None,
    departure_time: Optional[datetime] = None,
    sog_model: Optional[SOGModel] = None,
    max_legs: Optional[int] = None,
) -> List[LegResult]:
    """Leg results for a route with no leg cap unless one is given."""
    decomposer = LegDecomposer(sog_model=sog_model, max_legs=max_legs)
    legs, _ = decomposer.decompose(
        route,
        vessel,
        observations,
        stw_kts if stw_kts is not None else vessel.service_speed_kts,
        as_utc(departure_time) or datetime.now(timezone.utc),
    )
    return legs


def aggregate_totals(legs: Sequence[LegResult], fuel_price_per_ton: float) -> VoyageTotals:
    """
    Sum leg distance, duration and fuel into voyage totals.

    Raises:
        DegenerateVoyage: If total duration is zero (no legs or zero distance)
    """
    total_distance = sum(leg.distance_nm for leg in legs)
    total_duration = sum(leg.duration_hours for leg in legs)
    total_fuel = sum(leg_fuel_tons(leg.fuel_rate_tpd, leg.duration_hours) for leg in legs)

    if total_duration <= 0:
        raise DegenerateVoyage(
            f"Voyage has zero duration over {len(legs)} legs, average SOG is undefined"
        )

    return VoyageTotals(
        total_distance_nm=total_distance,
        total_duration_hours=total_duration,
        total_fuel_tons=total_fuel,
        estimated_cost_usd=total_fuel * fuel_price_per_ton,
        average_sog_kts=total_distance / total_duration,
    )


def summarize_weather_impact(legs: Sequence[LegResult]) -> WeatherImpact:
    """
    Mean wind, wave and resistance over the distinct samples used by legs.

    Raises:
        DegenerateVoyage: If no samples were used
    """
    used: Dict[int, WeatherObservation] = {}
    for leg in legs:
        used.setdefault(leg.sample_index, leg.weather)

    if not used:
        raise DegenerateVoyage("No weather samples were used, weather impact is undefined")

    samples = [used[i] for i in sorted(used)]
    winds = np.array([s.wind_speed_kts for s in samples])
    waves = np.array([s.wave_height_m for s in samples])
    factors = np.array([weather_resistance(s.wind_speed_kts, s.wave_height_m) for s in samples])

    return WeatherImpact(
        average_wind_speed_kts=float(winds.mean()),
        average_wave_height_m=float(waves.mean()),
        average_weather_factor=float(factors.mean()),
        samples_used=len(samples),
    )


class VoyageAnalyzer:
    """
    Analyse voyage performance along a route with sampled weather.

    One analyzer uses a single SOG strategy for every leg of every analysis,
    so results from the same analyzer are comparable.
    """

    def __init__(
        self,
        sog_model: Optional[SOGModel] = None,
        max_legs: Optional[int] = DEFAULT_MAX_LEGS,
        sample_stride: int = DEFAULT_SAMPLE_STRIDE,
        max_samples: int = DEFAULT_MAX_SAMPLES,
        allow_default_weather: bool = False,
    ):
        """
        Initialize voyage analyzer.

        Args:
            sog_model: Speed-over-ground strategy (along-course by default)
            max_legs: Cap on legs analysed, None for no cap
            sample_stride: Take every n-th waypoint as a weather sample point
            max_samples: Maximum number of weather sample points
            allow_default_weather: Substitute default conditions when no
                observation is available instead of raising NoWeatherData
        """
        self.decomposer = LegDecomposer(sog_model=sog_model, max_legs=max_legs)
        self.sample_stride = sample_stride
        self.max_samples = max_samples
        self.allow_default_weather = allow_default_weather

    @classmethod
    def from_settings(cls, settings) -> "VoyageAnalyzer":
        """Build an analyzer from engine Settings."""
        return cls(
            sog_model=create_sog_model(settings.sog_model, settings.min_sog_kts),
            max_legs=settings.max_legs,
            sample_stride=settings.weather_sample_stride,
            max_samples=settings.weather_max_samples,
            allow_default_weather=settings.allow_default_weather,
        )

    @property
    def sog_model(self) -> SOGModel:
        return self.decomposer.sog_model

    def sample_points(self, route: Route) -> List[Coordinate]:
        """Waypoints at which weather is sampled for an analysis."""
        return select_sample_points(route.waypoints, self.sample_stride, self.max_samples)

    def _resolve_observations(
        self,
        route: Route,
        observations: Sequence[WeatherObservation],
    ) -> List[WeatherObservation]:
        if observations:
            return [sanitize_observation(obs) for obs in observations]
        if not self.allow_default_weather:
            raise NoWeatherData(f"No weather observations available for route '{route.name}'")
        logger.warning(f"No weather data for route '{route.name}', using default conditions")
        return [default_observation(route.waypoints[0])]

    def analyze(
        self,
        route: Route,
        vessel: VesselProfile,
        observations: Sequence[WeatherObservation],
        laycan: Optional[LaycanWindow] = None,
        departure_time: Optional[datetime] = None,
        stw_kts: Optional[float] = None,
    ) -> VoyageAnalysis:
        """
        Analyse a voyage from already-fetched weather samples.

        Args:
            route: Route with at least 2 waypoints
            vessel: Vessel speed/fuel profile
            observations: Weather samples in route order
            laycan: Optional arrival window
            departure_time: Analysis start instant (now if None, naive = UTC)
            stw_kts: Speed through water (vessel service speed if None)

        Returns:
            VoyageAnalysis with legs, totals, ETA, laycan and weather impact

        Raises:
            InvalidRoute: Fewer than 2 waypoints
            InvalidVesselProfile: Unusable vessel profile or speed
            NoWeatherData: Empty observation set (unless defaults are allowed)
            DegenerateVoyage: Zero total duration
        """
        validate_route(route)
        vessel.validate()
        stw = vessel.service_speed_kts if stw_kts is None else stw_kts
        if not (stw > 0):
            raise InvalidVesselProfile(f"Speed through water must be positive, got {stw}")

        samples = self._resolve_observations(route, observations)
        departure = as_utc(departure_time) or datetime.now(timezone.utc)

        legs, legs_total = self.decomposer.decompose(route, vessel, samples, stw, departure)
        totals = aggregate_totals(legs, vessel.fuel_price_per_ton)
        impact = summarize_weather_impact(legs)

        eta = departure + timedelta(hours=totals.total_duration_hours)
        compliance = evaluate_laycan(eta, laycan)

        logger.info(
            f"Voyage analysis for '{route.name}': {len(legs)}/{legs_total} legs, "
            f"{totals.total_distance_nm:.1f} nm, {totals.total_duration_hours:.1f} h, "
            f"{totals.total_fuel_tons:.1f} t, laycan {compliance.status.value}"
        )

        return VoyageAnalysis(
            route=route,
            vessel=vessel,
            stw_kts=stw,
            sog_model=self.sog_model.name,
            departure_time=departure,
            eta=eta,
            totals=totals,
            laycan=compliance,
            weather_impact=impact,
            legs=legs,
            legs_analyzed=len(legs),
            legs_total=legs_total,
            route_distance_nm=route.total_distance_nm,
            observations=samples,
        )

    async def analyze_route(
        self,
        route: Route,
        vessel: VesselProfile,
        provider: WeatherProvider,
        laycan: Optional[LaycanWindow] = None,
        departure_time: Optional[datetime] = None,
        stw_kts: Optional[float] = None,
    ) -> VoyageAnalysis:
        """
        Fetch weather for the sampled waypoints concurrently, then analyse.

        Partial fetch failure is tolerated; only an empty result is fatal
        (unless default weather is allowed).
        """
        validate_route(route)
        vessel.validate()

        try:
            observations = await fetch_route_weather(provider, self.sample_points(route))
        except NoWeatherData:
            if not self.allow_default_weather:
                raise
            observations = []

        return self.analyze(
            route,
            vessel,
            observations,
            laycan=laycan,
            departure_time=departure_time,
            stw_kts=stw_kts,
        )
