"""
Arc-length resampling of route polylines.

Risk scoring averages over sample points, so samples must be spread evenly
along the route rather than following the provider's vertex density.
"""

import logging
from typing import List, Sequence

from ...data.distance_utils import distance, interpolate
from ...data.models import Coordinate
from ...errors import InputError

logger = logging.getLogger(__name__)

# meters; absorbs floating point drift when a sample lands on a vertex
_EPSILON_M = 1e-6


def resample(polyline: Sequence[Coordinate], spacing_m: float) -> List[Coordinate]:
    """
    Resample a polyline to near-uniform spacing.

    Args:
        polyline: Ordered route coordinates
        spacing_m: Target distance between consecutive samples in meters

    Returns:
        Sample points; always starts with the first vertex and ends with the
        last one. Inputs with fewer than two points come back unchanged.
    """
    points = list(polyline)
    if len(points) < 2:
        return points
    if not spacing_m > 0:
        raise InputError(f"spacing_m must be positive, got {spacing_m}")

    samples = [points[0]]
    carry = 0.0  # length walked since the last emitted sample

    for a, b in zip(points, points[1:]):
        segment_length = distance(a, b)
        if segment_length <= 0:
            continue

        position = 0.0
        while carry + (segment_length - position) >= spacing_m - _EPSILON_M:
            position += spacing_m - carry
            samples.append(interpolate(a, b, position / segment_length))
            carry = 0.0
        carry += segment_length - position

    last = points[-1]
    if len(samples) > 1 and distance(samples[-1], last) <= _EPSILON_M * 1000:
        samples[-1] = last
    else:
        samples.append(last)

    logger.debug(f"Resampled {len(points)} vertices into {len(samples)} samples at {spacing_m}m")
    return samples
