"""
Distance and interpolation primitives on the sphere.
"""

import math
from typing import Dict, Sequence

import numpy as np
from shapely.geometry import LineString

from .models import Coordinate

# Earth's radius in meters
EARTH_RADIUS_M = 6371000.0

# Meters per degree of latitude, rounded down so bounding boxes err on the large side
METERS_PER_DEGREE = 111000.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on Earth.

    Args:
        lat1, lon1: First point coordinates
        lat2, lon2: Second point coordinates

    Returns:
        Distance in meters
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (math.sin(delta_lat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2)
    # rounding can push a just past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters between two coordinates."""
    return haversine_distance(a.lat, a.lon, b.lat, b.lon)


def haversine_matrix(lats_a: np.ndarray, lons_a: np.ndarray,
                     lats_b: np.ndarray, lons_b: np.ndarray) -> np.ndarray:
    """
    Pairwise haversine distances.

    Args:
        lats_a, lons_a: Arrays of shape [M]
        lats_b, lons_b: Arrays of shape [N]

    Returns:
        Array of shape [M, N] with distances in meters
    """
    lat_a = np.radians(np.asarray(lats_a, dtype=float))[:, np.newaxis]
    lon_a = np.radians(np.asarray(lons_a, dtype=float))[:, np.newaxis]
    lat_b = np.radians(np.asarray(lats_b, dtype=float))[np.newaxis, :]
    lon_b = np.radians(np.asarray(lons_b, dtype=float))[np.newaxis, :]

    a = (np.sin((lat_b - lat_a) / 2) ** 2 +
         np.cos(lat_a) * np.cos(lat_b) * np.sin((lon_b - lon_a) / 2) ** 2)
    a = np.clip(a, 0.0, 1.0)
    return EARTH_RADIUS_M * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def interpolate(a: Coordinate, b: Coordinate, t: float) -> Coordinate:
    """
    Point at fraction `t` of the way from `a` to `b`.

    Linear in (lon, lat) space. Good enough at city scale where segments are
    tiny compared to the Earth's radius; not geodesically exact.
    """
    t = min(1.0, max(0.0, t))
    return Coordinate(a.lat + (b.lat - a.lat) * t, a.lon + (b.lon - a.lon) * t)


def polyline_length(coordinates: Sequence[Coordinate]) -> float:
    """Total length of a polyline in meters."""
    return sum(distance(coordinates[i], coordinates[i + 1])
               for i in range(len(coordinates) - 1))


def line_bounds(coordinates: Sequence[Coordinate]) -> Dict[str, float]:
    """
    Lat/lon bounding box of a polyline.

    Args:
        coordinates: At least two ordered coordinates

    Returns:
        Dict with lat_min, lat_max, lon_min, lon_max
    """
    lon_min, lat_min, lon_max, lat_max = LineString([(c.lon, c.lat) for c in coordinates]).bounds
    return {'lat_min': lat_min, 'lat_max': lat_max,
            'lon_min': lon_min, 'lon_max': lon_max}


def expand_bounds(bounds: Dict[str, float], buffer_meters: float) -> Dict[str, float]:
    """
    Grow a lat/lon bounding box by a buffer in meters.

    The longitude buffer uses the box's most poleward latitude so the
    expansion never undershoots.
    """
    lat_buffer = buffer_meters / METERS_PER_DEGREE
    widest_lat = min(89.0, max(abs(bounds['lat_min']), abs(bounds['lat_max'])) + lat_buffer)
    lon_buffer = buffer_meters / (METERS_PER_DEGREE * math.cos(math.radians(widest_lat)))

    return {
        'lat_min': bounds['lat_min'] - lat_buffer,
        'lat_max': bounds['lat_max'] + lat_buffer,
        'lon_min': bounds['lon_min'] - lon_buffer,
        'lon_max': bounds['lon_max'] + lon_buffer
    }


def points_in_bounds(lats: np.ndarray, lons: np.ndarray, bounds: Dict[str, float]) -> np.ndarray:
    """Boolean mask of points falling inside the bounds."""
    return (
        (lats >= bounds['lat_min']) &
        (lats <= bounds['lat_max']) &
        (lons >= bounds['lon_min']) &
        (lons <= bounds['lon_max'])
    )
