"""
Safety-Aware Routing API - FastAPI Main Application

A RESTful API that ranks walking routes by travel time and exposure to
reported incidents, and clusters reports into hotspots.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes.routing import hotspot_router, router as routing_router
from api.schemas.routing import ErrorResponse
from api.services.routing_service import API_VERSION, SafeRoutingAPIService, get_routing_service

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _cors_origins():
    """Comma-separated SAFE_ROUTING_CORS_ORIGINS, or any origin when unset."""
    raw = os.getenv("SAFE_ROUTING_CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the routing service before the first request and report its state.
    """
    logger.info("Starting Safety-Aware Routing API...")

    health = get_routing_service().get_health_status()
    if health.status == "healthy":
        logger.info(f"✓ Routing service ready with {health.reports_count} reports "
                    f"and {health.news_count} news incidents")
    else:
        logger.warning("⚠ Routing service running in degraded mode - report store unavailable")

    yield

    logger.info("Safety-Aware Routing API stopped")


app = FastAPI(
    title="Safety-Aware Routing API",
    description="""
    **Rank walking routes by safety and travel time**

    Candidate routes come from a routing provider (OSRM) or from the caller.
    Each route gets a 0-100 risk index from nearby incident reports and news
    incidents; routes passing too close to a report or a severe incident are
    excluded outright.

    ## Endpoints

    1. Service status: `GET /api/routing/health`
    2. Plan a route: `POST /api/routing/plan`
    3. Rank your own candidates: `POST /api/routing/rank`
    4. Hotspots for the map: `POST /api/hotspots`
    """,
    version=API_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Malformed coordinates, single-point routes and the like come back as 422.
    """
    logger.warning(f"Rejected request to {request.url.path}: {exc}")
    body = ErrorResponse(
        error="validation_error",
        message="Request body failed validation",
        details=[
            {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
            for error in exc.errors()
        ]
    )
    return JSONResponse(status_code=422, content=body.model_dump())


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    body = ErrorResponse(error="internal_server_error", message="Route computation failed unexpectedly")
    return JSONResponse(status_code=500, content=body.model_dump())


app.include_router(routing_router)
app.include_router(hotspot_router)


@app.get("/", tags=["general"])
async def root():
    """Service banner with links to the docs and health check."""
    return {
        "api": "Safety-Aware Routing API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/api/routing/health"
    }


@app.get("/health", tags=["general"])
async def api_health(service: SafeRoutingAPIService = Depends(get_routing_service)):
    """Liveness check that also reports the routing service state."""
    service_health = service.get_health_status()
    return {
        "api_status": "healthy",
        "service_status": service_health.status
    }
