import numpy as np
import pytest

from safe_routing.data.distance_utils import (
    distance,
    expand_bounds,
    haversine_distance,
    haversine_matrix,
    interpolate,
    line_bounds,
    polyline_length
)
from safe_routing.data.models import Coordinate

from geo_helpers import METERS_PER_DEGREE_LAT, ORIGIN, offset


def test_distance_to_self_is_zero():
    assert distance(ORIGIN, ORIGIN) == 0.0


def test_distance_is_symmetric_and_non_negative():
    a = Coordinate(45.4, -75.7)
    b = Coordinate(43.65, -79.38)
    assert distance(a, b) == pytest.approx(distance(b, a))
    assert distance(a, b) > 0


def test_one_degree_of_latitude():
    assert haversine_distance(0.0, 0.0, 1.0, 0.0) == pytest.approx(METERS_PER_DEGREE_LAT, rel=1e-9)


def test_antipodal_points_do_not_fail():
    assert haversine_distance(0.0, 0.0, 0.0, 180.0) == pytest.approx(np.pi * 6371000.0)


def test_matrix_matches_scalar_distance():
    samples = [ORIGIN, offset(ORIGIN, 300, 0)]
    sources = [offset(ORIGIN, 0, 200), offset(ORIGIN, 100, -50), offset(ORIGIN, 1000, 1000)]

    matrix = haversine_matrix(
        np.array([s.lat for s in samples]), np.array([s.lon for s in samples]),
        np.array([s.lat for s in sources]), np.array([s.lon for s in sources])
    )

    assert matrix.shape == (2, 3)
    for i, sample in enumerate(samples):
        for j, source in enumerate(sources):
            assert matrix[i, j] == pytest.approx(distance(sample, source))


def test_interpolate_endpoints_and_midpoint():
    b = offset(ORIGIN, 1000, 0)
    assert interpolate(ORIGIN, b, 0.0) == ORIGIN
    assert interpolate(ORIGIN, b, 1.0).lat == pytest.approx(b.lat)
    assert distance(ORIGIN, interpolate(ORIGIN, b, 0.5)) == pytest.approx(500.0, abs=1e-6)


def test_interpolate_clamps_fraction():
    b = offset(ORIGIN, 100, 100)
    assert interpolate(ORIGIN, b, -1.0) == ORIGIN
    assert interpolate(ORIGIN, b, 2.0).lon == pytest.approx(b.lon)


def test_polyline_length_sums_segments():
    coords = [ORIGIN, offset(ORIGIN, 300, 0), offset(ORIGIN, 300, 400)]
    assert polyline_length(coords) == pytest.approx(700.0, rel=1e-4)


def test_expand_bounds_covers_buffer():
    bounds = {'lat_min': ORIGIN.lat, 'lat_max': ORIGIN.lat, 'lon_min': ORIGIN.lon, 'lon_max': ORIGIN.lon}
    grown = expand_bounds(bounds, 200.0)

    east = offset(ORIGIN, 0, 199)
    north = offset(ORIGIN, 199, 0)
    assert grown['lon_max'] > east.lon
    assert grown['lat_max'] > north.lat
    assert grown['lat_min'] < ORIGIN.lat < grown['lat_max']


def test_line_bounds_covers_every_vertex():
    coords = [ORIGIN, offset(ORIGIN, 300, -200), offset(ORIGIN, -100, 450)]
    bounds = line_bounds(coords)

    assert bounds['lat_min'] == pytest.approx(min(c.lat for c in coords))
    assert bounds['lat_max'] == pytest.approx(max(c.lat for c in coords))
    assert bounds['lon_min'] == pytest.approx(min(c.lon for c in coords))
    assert bounds['lon_max'] == pytest.approx(max(c.lon for c in coords))
