"""
FastAPI routes for safety-aware routing endpoints.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from safe_routing.errors import InputError, NoCandidatesError, ProviderUnavailableError
from api.schemas.routing import (
    HealthResponse,
    HotspotRequest,
    HotspotResponse,
    PlanRequest,
    RankRequest,
    RankResponse
)
from api.services.routing_service import SafeRoutingAPIService, get_routing_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/routing", tags=["routing"])
hotspot_router = APIRouter(prefix="/api", tags=["hotspots"])


@router.get("/health", response_model=HealthResponse, summary="Health Check")
async def health_check(service: SafeRoutingAPIService = Depends(get_routing_service)):
    """
    Check the health status of the routing service.

    Returns:
        HealthResponse: Service health information
    """
    return service.get_health_status()


@router.post("/rank", response_model=RankResponse, summary="Rank Route Candidates")
def rank_routes(request: RankRequest, service: SafeRoutingAPIService = Depends(get_routing_service)):
    """
    Rank pre-computed route candidates by travel time and risk exposure.

    Routes that cross a hard exclusion zone are dropped. If every route is
    dropped, all of them are ranked and `all_excluded` is true.

    Example:
        ```json
        {
            "candidates": [
                {
                    "coordinates": [
                        {"latitude": 43.6426, "longitude": -79.3871},
                        {"latitude": 43.6452, "longitude": -79.3806}
                    ],
                    "duration_s": 540
                }
            ],
            "reports": [
                {"latitude": 43.6440, "longitude": -79.3840, "description": "Harassment"}
            ]
        }
        ```
    """
    logger.info(f"Rank request with {len(request.candidates)} candidates")
    try:
        return service.rank(request)
    except NoCandidatesError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except InputError as e:
        logger.warning(f"Rank request validation error: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ProviderUnavailableError as e:
        logger.error(f"Incident source unavailable: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.post("/plan", response_model=RankResponse, summary="Plan Safe Route")
def plan_route(request: PlanRequest, service: SafeRoutingAPIService = Depends(get_routing_service)):
    """
    Fetch walking routes from the routing provider and rank them.

    Each call gets a request number; a response marked `stale` was
    overtaken by a newer call and should be ignored by the client.
    """
    logger.info(f"Plan request from ({request.start.latitude}, {request.start.longitude}) to "
                f"({request.destination.latitude}, {request.destination.longitude})")
    try:
        return service.plan(request)
    except NoCandidatesError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ProviderUnavailableError as e:
        logger.error(f"Routing provider unavailable: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@hotspot_router.post("/hotspots", response_model=HotspotResponse, summary="Report Hotspots")
def report_hotspots(request: HotspotRequest, service: SafeRoutingAPIService = Depends(get_routing_service)):
    """
    Cluster report points and return the hotspots worth displaying.
    """
    try:
        return service.hotspots(request)
    except InputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ProviderUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.get("/", summary="API Information")
async def get_api_info():
    """
    Get information about the Safety-Aware Routing API.
    """
    return {
        "api": "Safety-Aware Routing API",
        "version": "1.0.0",
        "description": "Rank walking routes by travel time and incident exposure",
        "endpoints": {
            "POST /api/routing/rank": "Rank caller-supplied route candidates",
            "POST /api/routing/plan": "Fetch routes from the provider and rank them",
            "POST /api/hotspots": "Cluster reports into hotspots",
            "GET /api/routing/health": "Check service health status",
            "GET /api/routing/": "This information endpoint"
        }
    }
