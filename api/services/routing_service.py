"""
Service layer for the safety-aware routing API.

Translates request schemas into domain objects, runs the routing core and
builds response models.
"""

import logging
import os
from typing import List, Optional

from safe_routing.config.routing_config import RoutingConfig
from safe_routing.data.data_loader import load_news, load_reports
from safe_routing.data.models import (
    Coordinate,
    IncidentContext,
    IncidentReport,
    NewsIncident,
    RankingResult,
    RouteCandidate
)
from safe_routing.data.report_store import ReportStore
from safe_routing.export.geojson_export import (
    hotspots_to_feature_collection,
    ranking_to_feature_collection
)
from safe_routing.services.safe_routing_service import SafeRoutingService
from api.schemas.routing import (
    CandidateIn,
    HealthResponse,
    HotspotOut,
    HotspotRequest,
    HotspotResponse,
    NewsIn,
    PlanRequest,
    RankRequest,
    RankResponse,
    ReportIn,
    ScoredRouteOut,
    ViolationOut
)

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def _location(latitude: float, longitude: float) -> Coordinate:
    return Coordinate(latitude, longitude)


def candidate_from_schema(candidate: CandidateIn) -> RouteCandidate:
    return RouteCandidate(
        coordinates=tuple(_location(c.latitude, c.longitude) for c in candidate.coordinates),
        duration_s=candidate.duration_s,
        steps=candidate.steps,
        distance_m=candidate.distance_m
    )


def report_from_schema(report: ReportIn, index: int) -> IncidentReport:
    return IncidentReport(
        id=report.id if report.id is not None else str(index),
        coordinate=_location(report.latitude, report.longitude),
        description=report.description,
        occurred_at=report.occurred_at
    )


def news_from_schema(news: NewsIn) -> NewsIncident:
    return NewsIncident(
        coordinate=_location(news.latitude, news.longitude),
        severity=news.severity,
        title=news.title,
        published_at=news.published_at
    )


class SafeRoutingAPIService:
    """
    Wraps SafeRoutingService for the HTTP layer.
    """

    def __init__(self, core: SafeRoutingService):
        self.core = core

    def get_health_status(self) -> HealthResponse:
        health = self.core.get_health_status()
        return HealthResponse(
            status=health['status'],
            version=API_VERSION,
            reports_count=health['reports_count'],
            news_count=health['news_count']
        )

    def _context_for(self, reports: Optional[List[ReportIn]],
                     news: Optional[List[NewsIn]]) -> IncidentContext:
        """
        Request-supplied incidents take precedence over the loaded ones.

        Only the part the caller left out is read from the service, so a
        request carrying its own reports never touches the report store.
        """
        if reports is not None:
            report_set = [report_from_schema(r, i) for i, r in enumerate(reports)]
        else:
            report_set = self.core.current_reports()

        if news is not None:
            news_set = [news_from_schema(n) for n in news]
        else:
            news_set = self.core.current_news()

        return IncidentContext.of(report_set, news_set)

    def rank(self, request: RankRequest) -> RankResponse:
        candidates = [candidate_from_schema(c) for c in request.candidates]
        context = self._context_for(request.reports, request.news)
        result = self.core.rank(candidates, context)
        return self._build_response(result, request.include_geojson)

    def plan(self, request: PlanRequest) -> RankResponse:
        plan = self.core.plan(
            _location(request.start.latitude, request.start.longitude),
            _location(request.destination.latitude, request.destination.longitude),
            request.profile
        )
        if plan.ranking is None:
            return RankResponse(success=True, message="Superseded by a newer request",
                                request_id=plan.request_id, stale=True)

        response = self._build_response(plan.ranking, request.include_geojson)
        response.request_id = plan.request_id
        response.stale = plan.stale
        if plan.stale:
            response.message = "Superseded by a newer request"
        return response

    def hotspots(self, request: HotspotRequest) -> HotspotResponse:
        points = None
        if request.points is not None:
            points = [_location(p.latitude, p.longitude) for p in request.points]

        clusters = self.core.hotspots(points, request.radius_m, request.min_count)
        clusterer = self.core.clusterer
        hotspots = [
            HotspotOut(
                latitude=c.centroid.lat,
                longitude=c.centroid.lon,
                member_count=c.member_count,
                radius_m=clusterer.visualization_radius(c.member_count, request.min_count)
            )
            for c in clusters
        ]
        geojson = None
        if request.include_geojson:
            geojson = dict(hotspots_to_feature_collection(clusters, self.core.config))
        return HotspotResponse(success=True, hotspots=hotspots, geojson=geojson)

    @staticmethod
    def _build_response(result: RankingResult, include_geojson: bool) -> RankResponse:
        routes = [
            ScoredRouteOut(
                rank=route.rank,
                candidate_index=route.candidate_index,
                duration_s=route.duration_s,
                risk_index=route.risk_index,
                score=route.score,
                color=route.color,
                distance_m=route.candidate.distance_m,
                coordinates=[[c.lat, c.lon] for c in route.candidate.coordinates],
                steps=list(route.candidate.steps) if route.candidate.steps is not None else None
            )
            for route in result.routes
        ]
        violations = [
            ViolationOut(
                candidate_index=index,
                reason=violation.reason.value,
                distance_m=violation.distance_m,
                latitude=violation.sample.lat,
                longitude=violation.sample.lon
            )
            for index, violation in sorted(result.violations.items())
        ]

        if result.all_excluded:
            message = "All routes cross exclusion zones; showing unfiltered ranking"
        else:
            message = f"Ranked {len(routes)} routes"

        return RankResponse(
            success=True,
            message=message,
            all_excluded=result.all_excluded,
            routes=routes,
            violations=violations,
            route_geojson=dict(ranking_to_feature_collection(result)) if include_geojson else None
        )


def build_routing_service(config: Optional[RoutingConfig] = None) -> SafeRoutingAPIService:
    """
    Build the API service from the environment.

    SAFE_ROUTING_REPORTS_DB   SQLite database with the reports table
    SAFE_ROUTING_REPORTS_FILE JSON/GeoJSON reports (used when no database)
    SAFE_ROUTING_NEWS_FILE    JSON/GeoJSON news incidents
    """
    config = config or RoutingConfig()

    report_store = None
    reports = []
    db_path = os.getenv("SAFE_ROUTING_REPORTS_DB")
    reports_file = os.getenv("SAFE_ROUTING_REPORTS_FILE")
    if db_path:
        report_store = ReportStore(db_path)
    elif reports_file:
        reports = load_reports(reports_file)

    news = []
    news_file = os.getenv("SAFE_ROUTING_NEWS_FILE")
    if news_file:
        news = load_news(news_file)

    logger.info("Initializing safety-aware routing service...")
    return SafeRoutingAPIService(SafeRoutingService(config, report_store=report_store,
                                                    reports=reports, news=news))


_routing_service: Optional[SafeRoutingAPIService] = None


def get_routing_service() -> SafeRoutingAPIService:
    """FastAPI dependency returning the process-wide service."""
    global _routing_service
    if _routing_service is None:
        _routing_service = build_routing_service()
    return _routing_service
