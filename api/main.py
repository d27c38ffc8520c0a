"""
FastAPI backend for the Tempest voyage analysis engine.

Provides REST API endpoints for:
- Route catalog (waypoints, distance, planning duration)
- Vessel profiles
- Point and along-route weather
- Voyage analysis (per-leg SOG, fuel, ETA, laycan, insights)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from api.config import settings
from api.middleware import setup_middleware
from api.routers import routes, system, vessel, voyage, weather
from api.state import get_app_state
from tempest import __version__

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(message)s',  # JSON request logs are self-contained
)
logger = logging.getLogger(__name__)


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """
    Application factory for the Tempest API.

    Creates and configures the FastAPI application with middleware, routers
    and exception handlers.

    Returns:
        FastAPI: Configured application instance
    """
    application = FastAPI(
        title="Tempest API",
        description="""
## Voyage Analysis API

Weather-aware voyage performance estimates for merchant vessels.

### Features
- Great-circle route geometry for catalog or custom routes
- Speed over ground with ocean currents
- Cube-law fuel consumption with weather resistance
- ETA and laycan compliance
- Optimisation suggestions and AI-generated insights
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    setup_middleware(application, debug=settings.debug)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_credentials,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})

    application.include_router(system.router)
    application.include_router(routes.router)
    application.include_router(vessel.router)
    application.include_router(weather.router)
    application.include_router(voyage.router)

    return application


# Create the application
app = create_app()

# Initialize application state (thread-safe singleton)
_ = get_app_state()


def main():
    """Run the API with uvicorn."""
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=settings.api_workers,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
