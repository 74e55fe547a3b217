"""
Greedy agglomerative clustering of report points for hotspot display.

The partition is approximate and depends on seed order: when two dense
areas sit just over one radius apart, whichever is seeded first may pull in
the border points. Seeds are taken in geographic order (south to north,
then west to east, then input position) so the same point set always
yields the same clusters regardless of how it was listed.
"""

import logging
from typing import List, Optional, Sequence, Union

import numpy as np

from ...config.routing_config import RoutingConfig
from ...data.distance_utils import haversine_matrix
from ...data.models import Cluster, Coordinate, IncidentReport
from ...errors import InputError

logger = logging.getLogger(__name__)

PointLike = Union[Coordinate, IncidentReport]


class _PointArena:
    """
    Unclustered points tracked by original index.

    Removal swaps the last live slot into the hole, so the live set stays
    packed and no list is spliced while it is being scanned.
    """

    def __init__(self, lats: np.ndarray, lons: np.ndarray):
        self.lats = lats
        self.lons = lons
        self.live = list(range(len(lats)))
        self.slot = list(range(len(lats)))  # slot[index] = position in live, -1 once removed

    def __len__(self) -> int:
        return len(self.live)

    def __contains__(self, index: int) -> bool:
        return self.slot[index] >= 0

    def remove(self, index: int) -> None:
        position = self.slot[index]
        last = self.live[-1]
        self.live[position] = last
        self.slot[last] = position
        self.live.pop()
        self.slot[index] = -1

    def within(self, lat: float, lon: float, radius_m: float) -> List[int]:
        """Live indices within radius_m of (lat, lon)."""
        if not self.live:
            return []
        live = np.array(self.live)
        distances = haversine_matrix(np.array([lat]), np.array([lon]),
                                     self.lats[live], self.lons[live])[0]
        return [int(i) for i in live[distances <= radius_m]]


def _coordinate_of(point: PointLike) -> Coordinate:
    return point.coordinate if isinstance(point, IncidentReport) else point


class HotspotClusterer:
    """
    Groups report points into density clusters.
    """

    def __init__(self, config: Optional[RoutingConfig] = None):
        self.config = config or RoutingConfig()

    def cluster(self, points: Sequence[PointLike],
                radius_m: Optional[float] = None) -> List[Cluster]:
        """
        Partition points into clusters.

        Args:
            points: Coordinates or incident reports
            radius_m: Absorption radius around the running centroid
                (defaults to config.hotspot_radius_m)

        Returns:
            Every cluster, singletons included, in emission order
        """
        radius_m = self.config.hotspot_radius_m if radius_m is None else radius_m
        if radius_m < 0:
            raise InputError(f"radius_m must not be negative, got {radius_m}")
        if not points:
            return []

        coordinates = [_coordinate_of(p) for p in points]
        lats = np.array([c.lat for c in coordinates], dtype=float)
        lons = np.array([c.lon for c in coordinates], dtype=float)

        arena = _PointArena(lats, lons)
        seed_order = sorted(range(len(coordinates)), key=lambda i: (lats[i], lons[i], i))

        clusters = []
        for seed in seed_order:
            if seed not in arena:
                continue
            arena.remove(seed)
            members = [seed]

            passes = 0
            while True:
                passes += 1
                centroid_lat = float(lats[members].mean())
                centroid_lon = float(lons[members].mean())
                absorbed = arena.within(centroid_lat, centroid_lon, radius_m)
                if not absorbed:
                    break
                for index in absorbed:
                    arena.remove(index)
                members.extend(absorbed)

            clusters.append(Cluster(
                centroid=Coordinate(centroid_lat, centroid_lon),
                member_count=len(members),
                member_indices=tuple(sorted(members))
            ))
            logger.debug(f"Cluster of {len(members)} converged after {passes} passes")

        logger.info(f"Clustered {len(coordinates)} points into {len(clusters)} clusters")
        return clusters

    def hotspots(self, points: Sequence[PointLike],
                 radius_m: Optional[float] = None,
                 min_count: Optional[int] = None) -> List[Cluster]:
        """Clusters with at least `min_count` members, the ones worth displaying."""
        min_count = self.config.hotspot_min_count if min_count is None else min_count
        return [c for c in self.cluster(points, radius_m) if c.member_count >= min_count]

    def visualization_radius(self, member_count: int, min_count: Optional[int] = None) -> float:
        """
        Display radius in meters for a hotspot of the given size.
        """
        min_count = self.config.hotspot_min_count if min_count is None else min_count
        radius = (self.config.base_vis_radius_m +
                  self.config.per_report_radius_m * (member_count - min_count + 1))
        return float(min(self.config.max_vis_radius_m, max(0.0, radius)))
