"""
Export helpers for map clients.
"""

from .geojson_export import (
    route_to_feature,
    ranking_to_feature_collection,
    hotspots_to_feature_collection
)

__all__ = [
    'route_to_feature',
    'ranking_to_feature_collection',
    'hotspots_to_feature_collection'
]
