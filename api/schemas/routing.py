"""
Pydantic schemas for the safety-aware routing API.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class LocationRequest(BaseModel):
    """Request model for a single location."""
    latitude: float = Field(..., ge=-90, le=90, description="Latitude coordinate")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude coordinate")


class ReportIn(BaseModel):
    """An incident report snapshot entry."""
    id: Optional[str] = Field(default=None, description="Stable report identifier")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    description: str = Field(default="", description="Free-text description")
    occurred_at: Optional[datetime] = Field(default=None, description="When the incident happened")


class NewsIn(BaseModel):
    """A news-derived incident. Severity is clamped into 1-4."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    severity: int = Field(default=1, description="Severity 1 (minor) to 4 (severe)")
    title: str = Field(default="")
    published_at: Optional[datetime] = Field(default=None)


class CandidateIn(BaseModel):
    """A pre-computed route from a routing provider."""
    coordinates: List[LocationRequest] = Field(..., description="Route geometry, in travel order")
    duration_s: float = Field(..., ge=0, description="Travel time in seconds")
    distance_m: Optional[float] = Field(default=None, ge=0)
    steps: Optional[List[Any]] = Field(default=None, description="Opaque turn-by-turn steps")

    @field_validator('coordinates')
    @classmethod
    def validate_geometry(cls, v):
        """A route needs at least two points."""
        if len(v) < 2:
            raise ValueError('A route needs at least two coordinates')
        return v


class RankRequest(BaseModel):
    """Request model for ranking caller-supplied routes."""
    candidates: List[CandidateIn] = Field(..., description="Route candidates in provider order")
    reports: Optional[List[ReportIn]] = Field(default=None, description="Overrides the loaded reports")
    news: Optional[List[NewsIn]] = Field(default=None, description="Overrides the loaded news incidents")
    include_geojson: bool = Field(default=False, description="Attach a GeoJSON FeatureCollection")


class PlanRequest(BaseModel):
    """Request model for provider-backed route planning."""
    start: LocationRequest = Field(..., description="Starting location")
    destination: LocationRequest = Field(..., description="Destination location")
    profile: Optional[str] = Field(default=None, description="Travel profile, e.g. 'foot'")
    include_geojson: bool = Field(default=False)


class ScoredRouteOut(BaseModel):
    """One ranked route."""
    rank: int = Field(..., ge=0, description="0 = best")
    candidate_index: int = Field(..., description="Position in the candidate list")
    duration_s: float
    risk_index: float = Field(..., ge=0.0, le=100.0)
    score: float
    color: str
    distance_m: Optional[float] = None
    coordinates: List[List[float]] = Field(..., description="[[lat, lon], ...]")
    steps: Optional[List[Any]] = None


class ViolationOut(BaseModel):
    """Why a candidate was excluded."""
    candidate_index: int
    reason: str = Field(..., description="'NearReport' or 'SevereNews'")
    distance_m: float
    latitude: float
    longitude: float


class RankResponse(BaseModel):
    """Response model for ranking and planning."""
    success: bool = Field(..., description="Whether ranking succeeded")
    message: str = Field(..., description="Status message")
    all_excluded: bool = Field(default=False, description="Every candidate crossed a no-go zone")
    routes: List[ScoredRouteOut] = Field(default_factory=list)
    violations: List[ViolationOut] = Field(default_factory=list)
    request_id: Optional[int] = Field(default=None, description="Sequence number of a plan request")
    stale: bool = Field(default=False, description="Superseded by a newer plan request")
    route_geojson: Optional[Dict[str, Any]] = Field(default=None)


class HotspotRequest(BaseModel):
    """Request model for hotspot clustering."""
    points: Optional[List[LocationRequest]] = Field(default=None, description="Defaults to loaded reports")
    radius_m: Optional[float] = Field(default=None, gt=0, description="Cluster radius in meters")
    min_count: Optional[int] = Field(default=None, ge=1, description="Minimum reports per hotspot")
    include_geojson: bool = Field(default=False)


class HotspotOut(BaseModel):
    latitude: float
    longitude: float
    member_count: int = Field(..., ge=1)
    radius_m: float = Field(..., description="Display radius in meters")


class HotspotResponse(BaseModel):
    success: bool
    hotspots: List[HotspotOut] = Field(default_factory=list)
    geojson: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    reports_count: int = Field(..., description="Number of incident reports available")
    news_count: int = Field(..., description="Number of news incidents loaded")


class ErrorResponse(BaseModel):
    """Error response model."""
    success: bool = Field(False, description="Always false for error responses")
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Detailed error message")
    details: Optional[Any] = Field(None, description="Additional error details")
