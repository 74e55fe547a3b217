"""
Ranks route candidates by a blend of travel time and risk exposure.
"""

import logging
import warnings
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from ...config.routing_config import RoutingConfig
from ...data.models import (
    IncidentContext,
    IncidentReport,
    NewsIncident,
    RankingResult,
    RouteCandidate,
    ScoredRoute,
    Violation
)
from ...errors import AllExcludedWarning, NoCandidatesError
from ..scoring.exclusion_filter import ExclusionFilter
from ..scoring.risk_model import RiskModel

logger = logging.getLogger(__name__)


class RouteRanker:
    """
    Filter, score, sort and label route candidates.

    score = time_weight * duration_s + risk_weight * risk_index, lower is
    better. With the default weights one risk point outweighs almost six
    minutes of walking.
    """

    def __init__(self, config: Optional[RoutingConfig] = None):
        """
        Args:
            config: Routing configuration parameters
        """
        self.config = config or RoutingConfig()
        self.config.validate()
        self.risk_model = RiskModel(self.config)
        self.exclusion_filter = ExclusionFilter(self.config)

    def rank(self, candidates: Sequence[RouteCandidate],
             reports: Sequence[IncidentReport] = (),
             news: Sequence[NewsIncident] = (),
             now: Optional[datetime] = None) -> RankingResult:
        """
        Rank route candidates.

        Args:
            candidates: Routes from the routing provider, in provider order
            reports: Incident reports snapshot
            news: News incidents snapshot
            now: Reference time for recency decay

        Returns:
            RankingResult with routes sorted best first. `all_excluded` is set
            when every candidate violated an exclusion zone and the full set
            was ranked instead.

        Raises:
            NoCandidatesError: If there is nothing to rank
        """
        if not candidates:
            raise NoCandidatesError("No route candidates to rank")

        now = now or datetime.now(timezone.utc)

        # Step 1: Hard exclusion
        violations: Dict[int, Violation] = {}
        survivors: List[int] = []
        for index, candidate in enumerate(candidates):
            violation = self.exclusion_filter.check(candidate, reports, news)
            if violation is None:
                survivors.append(index)
            else:
                violations[index] = violation

        # Step 2: Never return nothing when a route exists
        all_excluded = not survivors
        if all_excluded:
            survivors = list(range(len(candidates)))
            logger.warning(f"All {len(candidates)} candidates cross exclusion zones - "
                           f"ranking the unfiltered set")
            warnings.warn("All route candidates crossed exclusion zones", AllExcludedWarning,
                          stacklevel=2)
        elif violations:
            logger.info(f"Excluded {len(violations)} of {len(candidates)} candidates")

        # Step 3: Composite score
        scored = []
        for index in survivors:
            candidate = candidates[index]
            risk = self.risk_model.score(candidate, reports, news, now)
            score = self.config.time_weight * candidate.duration_s + self.config.risk_weight * risk
            scored.append((score, risk, index))

        # Step 4: Stable sort, ties keep provider order
        scored.sort(key=lambda item: item[0])

        # Step 5: Rank and color
        palette = self.config.route_palette
        routes = tuple(
            ScoredRoute(
                candidate=candidates[index],
                risk_index=risk,
                duration_s=candidates[index].duration_s,
                score=score,
                rank=rank,
                color=palette[rank % len(palette)],
                candidate_index=index
            )
            for rank, (score, risk, index) in enumerate(scored)
        )

        logger.info(f"Ranked {len(routes)} routes; best is candidate "
                    f"{routes[0].candidate_index} (risk {routes[0].risk_index:.1f}, "
                    f"{routes[0].duration_s:.0f}s)")

        return RankingResult(routes=routes, all_excluded=all_excluded, violations=violations)

    def rank_context(self, candidates: Sequence[RouteCandidate],
                     context: IncidentContext,
                     now: Optional[datetime] = None) -> RankingResult:
        return self.rank(candidates, context.reports, context.news, now)


def rank_routes(candidates: Sequence[RouteCandidate],
                reports: Sequence[IncidentReport] = (),
                news: Sequence[NewsIncident] = (),
                config: Optional[RoutingConfig] = None,
                now: Optional[datetime] = None) -> RankingResult:
    """Functional shortcut for `RouteRanker(config).rank(...)`."""
    return RouteRanker(config).rank(candidates, reports, news, now)
