"""
Route ranking.
"""

from .route_ranker import RouteRanker, rank_routes

__all__ = ['RouteRanker', 'rank_routes']
