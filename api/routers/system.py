"""
System API router.

Handles the root endpoint and the health check.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from api.middleware import get_request_id
from api.state import get_app_state
from tempest import __version__
from tempest.resilience import get_all_circuit_breaker_status
from tempest.routes import ROUTES

router = APIRouter(tags=["System"])

logger = logging.getLogger(__name__)


@router.get("/")
async def root():
    """
    API root endpoint.

    Returns basic API information and available endpoint categories.
    """
    return {
        "name": "Tempest Voyage Analysis API",
        "version": __version__,
        "status": "operational",
        "docs": "/api/docs",
        "endpoints": {
            "health": "/api/health",
            "routes": "/api/routes",
            "vessels": "/api/vessels",
            "weather": "/api/weather/...",
            "voyage": "/api/voyage/analyze",
        },
    }


@router.get("/api/health")
async def health_check():
    """
    Health check for load balancers.

    Returns:
        - status: "healthy", or "degraded" when any circuit breaker is open
        - version, route count, weather cache stats, circuit breaker states
    """
    state = get_app_state()
    breakers = get_all_circuit_breaker_status()
    degraded = any(b['state'] == 'open' for b in breakers.values())

    return {
        "status": "degraded" if degraded else "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "routes": len(ROUTES),
        "weather_cache": state.weather_cache.get_stats(),
        "circuit_breakers": breakers,
        "components": state.health_check(),
        "request_id": get_request_id(),
    }
