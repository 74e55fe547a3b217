"""
Routing safety algorithms.

This module contains:
- Polyline resampling
- Risk scoring and hard exclusion
- Route ranking
- Hotspot clustering
"""

from .sampling.line_sampler import resample
from .scoring.risk_model import RiskModel, RiskBreakdown, score_route
from .scoring.exclusion_filter import ExclusionFilter
from .ranking.route_ranker import RouteRanker, rank_routes
from .clustering.hotspot_clusterer import HotspotClusterer

__all__ = [
    'resample',
    'RiskModel',
    'RiskBreakdown',
    'score_route',
    'ExclusionFilter',
    'RouteRanker',
    'rank_routes',
    'HotspotClusterer'
]
