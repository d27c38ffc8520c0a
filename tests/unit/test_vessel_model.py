"""
Tests for the vessel profile and fuel model.

Covers:
- Weather resistance bounds, identity and caps
- Cube-law burn rate identity at service speed
- Per-leg fuel mass
- Profile validation and partial spec merging
"""

import pytest

from tempest.analysis.vessel_model import (
    DEFAULT_VESSEL,
    VESSEL_CATALOG,
    VesselProfile,
    fuel_burn_rate,
    leg_fuel_tons,
    vessel_from_specs,
    weather_resistance,
)
from tempest.exceptions import InvalidVesselProfile


class TestWeatherResistance:

    def test_calm_is_exactly_one(self):
        assert weather_resistance(0.0, 0.0) == 1.0

    @pytest.mark.parametrize("wind", [0.0, 5.0, 15.0, 25.0, 40.0, 80.0])
    @pytest.mark.parametrize("wave", [0.0, 0.5, 2.0, 4.0, 8.0, 15.0])
    def test_never_below_one(self, wind, wave):
        assert weather_resistance(wind, wave) >= 1.0

    def test_reference_conditions(self):
        """25 kn and 4 m each contribute their full coefficient."""
        assert weather_resistance(25.0, 4.0) == pytest.approx(1.8)

    def test_caps(self):
        assert weather_resistance(100.0, 20.0) == weather_resistance(40.0, 8.0)
        assert weather_resistance(40.0, 8.0) == pytest.approx(1.0 + 0.5 * 2.56 + 0.3 * 2.0 ** 1.5)

    def test_negative_inputs_count_as_calm(self):
        assert weather_resistance(-5.0, -1.0) == 1.0


class TestFuelBurnRate:

    @pytest.mark.parametrize("base", [10.0, 35.0, 45.0])
    @pytest.mark.parametrize("speed", [8.0, 12.0, 14.5])
    def test_identity_at_service_speed(self, base, speed):
        assert fuel_burn_rate(base, speed, speed, 1.0) == pytest.approx(base)

    def test_cube_law(self):
        assert fuel_burn_rate(40.0, 6.0, 12.0) == pytest.approx(5.0)
        assert fuel_burn_rate(40.0, 24.0, 12.0) == pytest.approx(320.0)

    def test_weather_factor_multiplies(self):
        assert fuel_burn_rate(40.0, 12.0, 12.0, 1.5) == pytest.approx(60.0)

    def test_zero_service_speed_rejected(self):
        with pytest.raises(InvalidVesselProfile):
            fuel_burn_rate(40.0, 12.0, 0.0)

    def test_leg_fuel(self):
        assert leg_fuel_tons(48.0, 12.0) == pytest.approx(24.0)
        assert leg_fuel_tons(40.0, 5.0) == pytest.approx(8.3333, rel=1e-4)


class TestVesselProfile:

    def test_defaults(self):
        assert DEFAULT_VESSEL.service_speed_kts == 12.0
        assert DEFAULT_VESSEL.fuel_consumption_tpd == 45.0
        assert DEFAULT_VESSEL.fuel_price_per_ton == 650.0
        assert DEFAULT_VESSEL.name == "Unknown Vessel"

    @pytest.mark.parametrize("field, value", [
        ("service_speed_kts", 0.0),
        ("service_speed_kts", -3.0),
        ("fuel_consumption_tpd", 0.0),
        ("fuel_price_per_ton", -1.0),
        ("service_speed_kts", float('nan')),
    ])
    def test_invalid_profile(self, field, value):
        with pytest.raises(InvalidVesselProfile):
            VesselProfile(**{field: value}).validate()

    def test_zero_price_allowed(self):
        assert VesselProfile(fuel_price_per_ton=0.0).validate().fuel_price_per_ton == 0.0

    def test_catalog_profiles_valid(self):
        ids = [v.vessel_id for v in VESSEL_CATALOG]
        assert ids == ["vessel-a", "vessel-b"]
        for vessel in VESSEL_CATALOG:
            vessel.validate()


class TestVesselFromSpecs:

    def test_partial_specs_merge_over_default(self):
        vessel = vessel_from_specs({"service_speed_kts": 14.0, "fuel_consumption_tpd": None})
        assert vessel.service_speed_kts == 14.0
        assert vessel.fuel_consumption_tpd == DEFAULT_VESSEL.fuel_consumption_tpd
        assert vessel.name == "Unknown Vessel"

    def test_custom_base(self):
        vessel = vessel_from_specs({"fuel_price_per_ton": 700.0}, base=VESSEL_CATALOG[1])
        assert vessel.name == "Bulk Carrier Beta"
        assert vessel.fuel_price_per_ton == 700.0

    def test_empty_specs(self):
        assert vessel_from_specs(None) == DEFAULT_VESSEL

    def test_unknown_field(self):
        with pytest.raises(InvalidVesselProfile, match="Unknown vessel fields"):
            vessel_from_specs({"draft_m": 11.0})

    def test_invalid_merged_profile(self):
        with pytest.raises(InvalidVesselProfile):
            vessel_from_specs({"service_speed_kts": 0})
