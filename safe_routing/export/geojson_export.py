"""
GeoJSON export of ranked routes and hotspots for the presentation layer.
"""

from typing import Optional, Sequence

from geojson import Feature, FeatureCollection, LineString, Point

from ..algorithms.clustering.hotspot_clusterer import HotspotClusterer
from ..config.routing_config import RoutingConfig
from ..data.models import Cluster, RankingResult, ScoredRoute


def route_to_feature(route: ScoredRoute) -> Feature:
    """One ranked route as a LineString feature with its ranking properties."""
    coords = list(route.candidate.line.coords)
    properties = route.get_summary()
    properties['stroke'] = route.color
    if route.candidate.distance_m is not None:
        properties['distance_m'] = round(route.candidate.distance_m, 1)
    return Feature(geometry=LineString(coords), properties=properties)


def ranking_to_feature_collection(result: RankingResult) -> FeatureCollection:
    """
    Ranked routes, best first.

    The collection carries `all_excluded` so clients can warn that every
    option crosses a no-go zone.
    """
    collection = FeatureCollection([route_to_feature(route) for route in result.routes])
    collection['all_excluded'] = result.all_excluded
    collection['excluded_candidates'] = {
        str(index): violation.reason.value for index, violation in result.violations.items()
    }
    return collection


def hotspots_to_feature_collection(clusters: Sequence[Cluster],
                                   config: Optional[RoutingConfig] = None) -> FeatureCollection:
    """Hotspot centroids as Point features with a display radius."""
    clusterer = HotspotClusterer(config)
    features = [
        Feature(
            geometry=Point((cluster.centroid.lon, cluster.centroid.lat)),
            properties={
                'member_count': cluster.member_count,
                'radius_m': clusterer.visualization_radius(cluster.member_count),
            }
        )
        for cluster in clusters
    ]
    return FeatureCollection(features)
