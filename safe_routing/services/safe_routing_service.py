"""
Orchestration of the routing safety pipeline.

The service owns the I/O (routing provider, report store) and hands
immutable snapshots to the pure algorithms:

    provider -> candidates -> RouteRanker -> RankingResult
    reports  -> HotspotClusterer -> hotspots
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..algorithms.clustering.hotspot_clusterer import HotspotClusterer
from ..algorithms.ranking.route_ranker import RouteRanker
from ..config.routing_config import RoutingConfig
from ..data.models import (
    Cluster,
    Coordinate,
    IncidentContext,
    IncidentReport,
    NewsIncident,
    RankingResult,
    RouteCandidate
)
from ..data.report_store import ReportStore
from ..errors import ProviderUnavailableError
from ..providers.osrm_provider import OSRMRoutingProvider
from .request_sequencer import RequestSequencer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanResult:
    """
    Outcome of one plan request.

    `stale` results were superseded and not applied. `ranking` is None when
    the request was superseded before ranking started.
    """
    request_id: int
    ranking: Optional[RankingResult]
    stale: bool = False


class SafeRoutingService:
    """
    Entry point tying provider, incident sources and algorithms together.
    """

    def __init__(self, config: Optional[RoutingConfig] = None,
                 provider: Optional[Any] = None,
                 report_store: Optional[ReportStore] = None,
                 reports: Sequence[IncidentReport] = (),
                 news: Sequence[NewsIncident] = ()):
        """
        Args:
            config: Routing configuration parameters
            provider: Object with `fetch_routes(origin, destination, profile)`;
                defaults to OSRM
            report_store: Optional database of reports, read on every request
            reports: Static reports used when no store is configured
            news: News incidents snapshot
        """
        self.config = config or RoutingConfig()
        self.config.validate()
        self.provider = provider or OSRMRoutingProvider(self.config)
        self.report_store = report_store
        self._context = IncidentContext.of(reports, news)

        self.ranker = RouteRanker(self.config)
        self.clusterer = HotspotClusterer(self.config)
        self.sequencer = RequestSequencer()

        logger.info(f"SafeRoutingService initialized with {len(self._context.reports)} reports, "
                    f"{len(self._context.news)} news incidents"
                    f"{' and a report store' if report_store else ''}")

    def update_incidents(self, reports: Optional[Sequence[IncidentReport]] = None,
                         news: Optional[Sequence[NewsIncident]] = None) -> None:
        """Swap in a new incident snapshot; in-flight computations keep the old one."""
        self._context = IncidentContext.of(
            self._context.reports if reports is None else reports,
            self._context.news if news is None else news
        )

    def current_reports(self) -> Tuple[IncidentReport, ...]:
        """
        Reports from the store when one is configured, else the static set.

        Raises:
            ProviderUnavailableError: If the report store cannot be read
        """
        if self.report_store is None:
            return self._context.reports
        return tuple(self.report_store.fetch_reports())

    def current_news(self) -> Tuple[NewsIncident, ...]:
        return self._context.news

    def load_context(self) -> IncidentContext:
        """Current incident snapshot; reads the report store when present."""
        return IncidentContext(self.current_reports(), self.current_news())

    def rank(self, candidates: Sequence[RouteCandidate],
             context: Optional[IncidentContext] = None,
             now: Optional[datetime] = None) -> RankingResult:
        """Rank externally supplied candidates."""
        context = context or self.load_context()
        return self.ranker.rank_context(candidates, context, now)

    def plan(self, origin: Coordinate, destination: Coordinate,
             profile: Optional[str] = None,
             now: Optional[datetime] = None) -> PlanResult:
        """
        Fetch candidates from the provider and rank them.

        A request overtaken while waiting on the provider is not ranked; its
        result comes back stale with no ranking.

        Raises:
            ProviderUnavailableError: If the provider fails
            NoCandidatesError: If the provider returns no routes
        """
        request_id = self.sequencer.next_request()
        context = self.load_context()

        candidates = self.provider.fetch_routes(origin, destination, profile or self.config.osrm_profile)
        if not self.sequencer.is_current(request_id):
            logger.info(f"Request {request_id} superseded before ranking "
                        f"(latest is {self.sequencer.latest_request})")
            return PlanResult(request_id=request_id, ranking=None, stale=True)

        ranking = self.ranker.rank_context(candidates, context, now)

        applied = self.sequencer.apply(request_id, ranking)
        if not applied:
            logger.info(f"Discarding stale result for request {request_id} "
                        f"(latest is {self.sequencer.latest_request})")
        return PlanResult(request_id=request_id, ranking=ranking, stale=not applied)

    @property
    def latest_ranking(self) -> Optional[RankingResult]:
        return self.sequencer.latest_result

    def hotspots(self, points: Optional[Sequence[Any]] = None,
                 radius_m: Optional[float] = None,
                 min_count: Optional[int] = None) -> List[Cluster]:
        """Significant hotspots for the given points, or for the current reports."""
        if points is None:
            points = self.load_context().reports
        return self.clusterer.hotspots(points, radius_m, min_count)

    def get_health_status(self) -> Dict[str, Any]:
        """Service status with current incident counts."""
        status = "healthy"
        report_count = len(self._context.reports)
        if self.report_store is not None:
            try:
                report_count = self.report_store.count()
            except ProviderUnavailableError as e:
                logger.warning(f"Report store unavailable: {e}")
                status = "degraded"
                report_count = 0

        return {
            'status': status,
            'reports_count': report_count,
            'news_count': len(self._context.news),
            'latest_request': self.sequencer.latest_request,
        }
