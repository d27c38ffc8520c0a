"""
Vessel speed/fuel profile and the fuel consumption model.

Implements a deliberately simple model:
- Cube-law scaling of burn rate with speed (propulsion power ~ speed^3)
- Dimensionless weather-resistance multiplier from wind and waves
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Optional

from tempest.exceptions import InvalidVesselProfile

logger = logging.getLogger(__name__)

# Caps keep erroneous or extreme observations from producing runaway multipliers
WIND_CAP_KTS = 40.0
WAVE_CAP_M = 8.0


@dataclass(frozen=True)
class VesselProfile:
    """Vessel speed and fuel characteristics. Immutable for one analysis."""

    name: str = "Unknown Vessel"
    service_speed_kts: float = 12.0  # Speed through water at service (knots)
    fuel_consumption_tpd: float = 45.0  # Fuel burn at service speed (tons/day)
    fuel_price_per_ton: float = 650.0  # Fuel unit price (USD/ton)
    fuel_type: str = "VLSFO"
    vessel_id: Optional[str] = None
    max_speed_kts: Optional[float] = None

    def validate(self) -> "VesselProfile":
        """
        Check the profile can drive an analysis.

        Raises:
            InvalidVesselProfile: On non-positive speed or fuel rate, or negative price
        """
        if not _positive(self.service_speed_kts):
            raise InvalidVesselProfile(
                f"Service speed must be positive, got {self.service_speed_kts}"
            )
        if not _positive(self.fuel_consumption_tpd):
            raise InvalidVesselProfile(
                f"Fuel consumption must be positive, got {self.fuel_consumption_tpd}"
            )
        if not (math.isfinite(self.fuel_price_per_ton) and self.fuel_price_per_ton >= 0):
            raise InvalidVesselProfile(
                f"Fuel price must be non-negative, got {self.fuel_price_per_ton}"
            )
        return self

    def to_dict(self) -> Dict:
        return {
            'vessel_id': self.vessel_id,
            'name': self.name,
            'service_speed_kts': self.service_speed_kts,
            'fuel_consumption_tpd': self.fuel_consumption_tpd,
            'fuel_price_per_ton': self.fuel_price_per_ton,
            'fuel_type': self.fuel_type,
            'max_speed_kts': self.max_speed_kts,
        }


def _positive(value: float) -> bool:
    return value is not None and math.isfinite(value) and value > 0


DEFAULT_VESSEL = VesselProfile()

VESSEL_CATALOG: List[VesselProfile] = [
    VesselProfile(
        vessel_id="vessel-a",
        name="Container Vessel Alpha",
        service_speed_kts=12.5,
        max_speed_kts=16.0,
        fuel_consumption_tpd=40.0,
        fuel_type="VLSFO",
    ),
    VesselProfile(
        vessel_id="vessel-b",
        name="Bulk Carrier Beta",
        service_speed_kts=11.0,
        max_speed_kts=14.0,
        fuel_consumption_tpd=35.0,
        fuel_type="MGO",
    ),
]


def vessel_from_specs(specs: Optional[Mapping] = None, base: VesselProfile = DEFAULT_VESSEL) -> VesselProfile:
    """
    Merge partial caller-supplied specs over a base profile.

    Keys that are missing or None keep the base value.

    Raises:
        InvalidVesselProfile: If the merged profile is not usable
    """
    overrides = {k: v for k, v in (specs or {}).items() if v is not None}
    unknown = set(overrides) - set(VesselProfile.__dataclass_fields__)
    if unknown:
        raise InvalidVesselProfile(f"Unknown vessel fields: {sorted(unknown)}")
    return replace(base, **overrides).validate()


def weather_resistance(wind_speed_kts: float, wave_height_m: float) -> float:
    """
    Dimensionless drag multiplier from wind and sea state.

    1 + 0.5*(min(wind,40)/25)^2 + 0.3*(min(wave,8)/4)^1.5

    Negative inputs count as calm, so the result is always >= 1.0.

    Args:
        wind_speed_kts: True wind speed in knots
        wave_height_m: Significant wave height in meters

    Returns:
        Multiplier >= 1.0 (exactly 1.0 in calm conditions)
    """
    wind = min(max(wind_speed_kts, 0.0), WIND_CAP_KTS)
    wave = min(max(wave_height_m, 0.0), WAVE_CAP_M)

    wind_term = 0.5 * (wind / 25.0) ** 2
    wave_term = 0.3 * (wave / 4.0) ** 1.5
    return 1.0 + wind_term + wave_term


def fuel_burn_rate(
    base_consumption_tpd: float,
    actual_speed_kts: float,
    service_speed_kts: float,
    weather_factor: float = 1.0,
) -> float:
    """
    Fuel burn rate at a given speed.

    rate = base * (actual / service)^3 * weather_factor

    Args:
        base_consumption_tpd: Burn at service speed in calm water (tons/day)
        actual_speed_kts: Speed the vessel is making (knots)
        service_speed_kts: Service speed the base rate refers to (knots)
        weather_factor: Weather resistance multiplier (>= 1.0)

    Returns:
        Burn rate in tons/day
    """
    if service_speed_kts <= 0:
        raise InvalidVesselProfile(f"Service speed must be positive, got {service_speed_kts}")

    speed_ratio = actual_speed_kts / service_speed_kts
    return base_consumption_tpd * speed_ratio ** 3 * max(weather_factor, 1.0)


def leg_fuel_tons(rate_tpd: float, duration_hours: float) -> float:
    """Fuel mass for a leg: rate (t/day) scaled by leg duration."""
    return rate_tpd * duration_hours / 24.0
