from datetime import datetime, timezone

import pytest

from safe_routing.config.routing_config import RoutingConfig
from safe_routing.data.models import RouteCandidate

from geo_helpers import ORIGIN, offset, path, report_at, route, straight_north


@pytest.fixture
def now():
    return datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def config():
    return RoutingConfig()


@pytest.fixture
def direct_route() -> RouteCandidate:
    """1 km straight north from ORIGIN, 12 minutes."""
    return route(straight_north(ORIGIN, 1000.0), duration_s=720.0)


@pytest.fixture
def detour_route() -> RouteCandidate:
    """Goes 400 m west, 1 km north, and back east to the same destination."""
    return route(path(ORIGIN, [(0, 0), (0, -400), (1000, -400), (1000, 0)]), duration_s=1300.0)


@pytest.fixture
def report_near_direct():
    """50 m east of the direct route's midpoint, over 450 m from the detour."""
    return report_at(offset(ORIGIN, north_m=500, east_m=50), report_id="near")
