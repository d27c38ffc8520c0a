"""
Vessel API router.

Exposes the built-in vessel profiles used to seed voyage analyses.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from api.schemas import VesselModel
from tempest.analysis.vessel_model import DEFAULT_VESSEL, VESSEL_CATALOG

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/vessels", tags=["Vessel"])


@router.get("", response_model=List[VesselModel])
async def get_vessels():
    """List the built-in vessel profiles."""
    return [vessel.to_dict() for vessel in VESSEL_CATALOG]


@router.get("/default", response_model=VesselModel)
async def get_default_vessel():
    """Profile used when a request supplies no vessel."""
    return DEFAULT_VESSEL.to_dict()


@router.get("/{vessel_id}", response_model=VesselModel)
async def get_vessel(vessel_id: str):
    for vessel in VESSEL_CATALOG:
        if vessel.vessel_id == vessel_id:
            return vessel.to_dict()
    raise HTTPException(status_code=404, detail=f"Vessel not found: {vessel_id}")
