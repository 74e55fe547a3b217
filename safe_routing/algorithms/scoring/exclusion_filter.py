"""
Hard no-go zone check.

This is a pass/fail test, separate from the continuous risk index: a route
that comes within the hard radius of a report, or of a severe news
incident, is removed from the candidate set by the ranker.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from ...config.routing_config import RoutingConfig
from ...data.distance_utils import haversine_matrix
from ...data.models import IncidentReport, NewsIncident, Violation, ViolationReason
from ..sampling.line_sampler import resample
from .risk_model import RouteLike, coordinate_arrays, route_coordinates

logger = logging.getLogger(__name__)


class ExclusionFilter:
    """
    Flags routes that cross hard exclusion radii.
    """

    def __init__(self, config: Optional[RoutingConfig] = None):
        self.config = config or RoutingConfig()

    def check(self, route: RouteLike,
              reports: Sequence[IncidentReport] = (),
              news: Sequence[NewsIncident] = ()) -> Optional[Violation]:
        """
        Check a route against the hard exclusion radii.

        Samples are walked in route order; at each sample reports are
        checked before severe news.

        Args:
            route: RouteCandidate or ordered coordinates
            reports: Incident reports snapshot
            news: News incidents snapshot

        Returns:
            The first Violation found, or None if the route is clear
        """
        coordinates = route_coordinates(route)
        severe = [(i, n) for i, n in enumerate(news)
                  if n.severity >= self.config.severe_severity_threshold]
        if len(coordinates) < 2 or (not reports and not severe):
            return None

        samples = resample(coordinates, self.config.exclusion_sample_spacing_m)
        sample_lats, sample_lons = coordinate_arrays(samples)

        report_hit = self._first_hits(
            sample_lats, sample_lons, [r.coordinate for r in reports],
            self.config.hard_report_radius_m
        )
        news_hit = self._first_hits(
            sample_lats, sample_lons, [n.coordinate for _, n in severe],
            self.config.hard_news_radius_m
        )

        violation = None
        for sample_index in range(len(samples)):
            if sample_index in report_hit:
                source_index, dist = report_hit[sample_index]
                violation = Violation(ViolationReason.NEAR_REPORT, sample_index,
                                      samples[sample_index], source_index, dist)
                break
            if sample_index in news_hit:
                local_index, dist = news_hit[sample_index]
                violation = Violation(ViolationReason.SEVERE_NEWS, sample_index,
                                      samples[sample_index], severe[local_index][0], dist)
                break

        if violation is not None:
            logger.debug(f"Route violates {violation.reason.value} at sample "
                         f"{violation.sample_index} ({violation.distance_m:.0f}m)")
        return violation

    def is_excluded(self, route: RouteLike,
                    reports: Sequence[IncidentReport] = (),
                    news: Sequence[NewsIncident] = ()) -> bool:
        return self.check(route, reports, news) is not None

    @staticmethod
    def _first_hits(sample_lats: np.ndarray, sample_lons: np.ndarray,
                    sources, radius_m: float) -> dict:
        """
        Map each offending sample index to (nearest source index, distance).
        """
        if not sources:
            return {}

        source_lats, source_lons = coordinate_arrays(sources)
        distances = haversine_matrix(sample_lats, sample_lons, source_lats, source_lons)
        nearest = distances.argmin(axis=1)
        nearest_distance = distances[np.arange(len(sample_lats)), nearest]

        hits = {}
        for sample_index in np.flatnonzero(nearest_distance <= radius_m):
            hits[int(sample_index)] = (int(nearest[sample_index]),
                                       float(nearest_distance[sample_index]))
        return hits
