"""
Risk exposure scoring for route candidates.

Each route is resampled at a fixed spacing and every sample collects a
quadratic-falloff contribution from nearby reports and news incidents,
decayed by age. The sum is averaged over the samples so long routes are not
penalized for their length alone, then scaled to a 0-100 index.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from ...config.routing_config import RoutingConfig
from ...data.distance_utils import expand_bounds, haversine_matrix, line_bounds, points_in_bounds
from ...data.models import Coordinate, IncidentReport, NewsIncident, RouteCandidate
from ..sampling.line_sampler import resample

logger = logging.getLogger(__name__)

RouteLike = Union[RouteCandidate, Sequence[Coordinate]]


def falloff(distance_m: np.ndarray, radius_m: float) -> np.ndarray:
    """(1 - d/r)^2 inside the radius, 0 beyond it."""
    d = np.asarray(distance_m, dtype=float)
    return np.where(d > radius_m, 0.0, (1.0 - d / radius_m) ** 2)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def recency(timestamp: Optional[datetime], half_life_h: float, now: datetime) -> float:
    """
    Half-life decay weight for an incident.

    Entries without a timestamp never decay. Timestamps in the future count
    as brand new.
    """
    if timestamp is None:
        return 1.0
    age_h = (_as_utc(now) - _as_utc(timestamp)).total_seconds() / 3600.0
    return 0.5 ** (max(0.0, age_h) / half_life_h)


def route_coordinates(route: RouteLike) -> Tuple[Coordinate, ...]:
    if isinstance(route, RouteCandidate):
        return route.coordinates
    return tuple(route)


def coordinate_arrays(coordinates: Sequence[Coordinate]) -> Tuple[np.ndarray, np.ndarray]:
    """Split coordinates into (lats, lons) arrays."""
    lats = np.fromiter((c.lat for c in coordinates), dtype=float, count=len(coordinates))
    lons = np.fromiter((c.lon for c in coordinates), dtype=float, count=len(coordinates))
    return lats, lons


@dataclass(frozen=True)
class RiskBreakdown:
    """Diagnostic view of a risk computation."""
    risk_index: float
    report_exposure: float
    news_exposure: float
    sample_count: int
    reports_considered: int
    news_considered: int


class RiskModel:
    """
    Converts a route plus weighted point sources into a bounded risk index.
    """

    def __init__(self, config: Optional[RoutingConfig] = None):
        """
        Args:
            config: Routing configuration parameters
        """
        self.config = config or RoutingConfig()

    def score(self, route: RouteLike,
              reports: Sequence[IncidentReport] = (),
              news: Sequence[NewsIncident] = (),
              now: Optional[datetime] = None) -> float:
        """
        Calculate the risk index of a route.

        Args:
            route: RouteCandidate or ordered coordinates
            reports: Incident reports snapshot
            news: News incidents snapshot
            now: Reference time for recency decay (defaults to current UTC time)

        Returns:
            Risk index in [0, 100]
        """
        return self.breakdown(route, reports, news, now).risk_index

    def breakdown(self, route: RouteLike,
                  reports: Sequence[IncidentReport] = (),
                  news: Sequence[NewsIncident] = (),
                  now: Optional[datetime] = None) -> RiskBreakdown:
        """Same as `score` but returns the per-source exposure as well."""
        coordinates = route_coordinates(route)
        if len(coordinates) < 2 or (not reports and not news):
            return RiskBreakdown(0.0, 0.0, 0.0, 0, 0, 0)

        now = now or datetime.now(timezone.utc)
        samples = resample(coordinates, self.config.sample_spacing_m)
        sample_lats, sample_lons = coordinate_arrays(samples)
        route_bounds = line_bounds(coordinates)

        report_weights = np.array([
            self.config.report_weight * recency(r.occurred_at, self.config.report_half_life_h, now)
            for r in reports
        ], dtype=float)
        report_exposure, reports_considered = self._exposure(
            sample_lats, sample_lons, [r.coordinate for r in reports],
            report_weights, self.config.report_radius_m, route_bounds
        )

        news_weights = np.array([
            self.config.news_weight * n.severity *
            recency(n.published_at, self.config.news_half_life_h, now)
            for n in news
        ], dtype=float)
        news_exposure, news_considered = self._exposure(
            sample_lats, sample_lons, [n.coordinate for n in news],
            news_weights, self.config.news_radius_m, route_bounds
        )

        sample_count = len(samples)
        raw = (report_exposure + news_exposure) / sample_count * 100.0
        risk_index = float(min(100.0, max(0.0, raw)))

        logger.debug(f"Risk {risk_index:.2f} over {sample_count} samples "
                     f"({reports_considered} reports, {news_considered} news nearby)")

        return RiskBreakdown(
            risk_index=risk_index,
            report_exposure=float(report_exposure),
            news_exposure=float(news_exposure),
            sample_count=sample_count,
            reports_considered=reports_considered,
            news_considered=news_considered
        )

    def _exposure(self, sample_lats: np.ndarray, sample_lons: np.ndarray,
                  sources: Sequence[Coordinate], weights: np.ndarray,
                  radius_m: float, route_bounds: dict) -> Tuple[float, int]:
        """Sum of weighted falloff contributions over all samples."""
        if not sources:
            return 0.0, 0

        source_lats, source_lons = coordinate_arrays(sources)

        # Only sources near the route's bounding box can contribute
        mask = points_in_bounds(source_lats, source_lons, expand_bounds(route_bounds, radius_m))
        if not mask.any():
            return 0.0, 0

        distances = haversine_matrix(sample_lats, sample_lons, source_lats[mask], source_lons[mask])
        contributions = falloff(distances, radius_m) @ weights[mask]
        return float(contributions.sum()), int(mask.sum())


def score_route(route: RouteLike,
                reports: Sequence[IncidentReport] = (),
                news: Sequence[NewsIncident] = (),
                config: Optional[RoutingConfig] = None,
                now: Optional[datetime] = None) -> float:
    """Functional shortcut for `RiskModel(config).score(...)`."""
    return RiskModel(config).score(route, reports, news, now)
