"""Vessel API schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VesselModel(BaseModel):
    """A vessel profile as returned by the API."""
    vessel_id: Optional[str] = None
    name: str
    service_speed_kts: float
    max_speed_kts: Optional[float] = None
    fuel_consumption_tpd: float
    fuel_price_per_ton: float
    fuel_type: str


class VesselSpecsInput(BaseModel):
    """
    Partial vessel specs supplied with an analysis request.

    Missing fields fall back to the selected catalog vessel or the default
    profile. Range checks happen in the engine so that bad values map to 400.
    Short aliases (serviceSpeed, fuelConsumption, fuelPrice) are accepted.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    service_speed_kts: Optional[float] = Field(None, alias="serviceSpeed")
    fuel_consumption_tpd: Optional[float] = Field(None, alias="fuelConsumption")
    fuel_price_per_ton: Optional[float] = Field(None, alias="fuelPrice")
    fuel_type: Optional[str] = None
