import pytest

from safe_routing.algorithms.scoring.exclusion_filter import ExclusionFilter
from safe_routing.config.routing_config import RoutingConfig
from safe_routing.data.models import ViolationReason

from geo_helpers import ORIGIN, news_at, offset, report_at, route, straight_north


@pytest.fixture
def exclusion(config):
    return ExclusionFilter(config)


def test_flags_report_50m_from_route(exclusion, direct_route, report_near_direct):
    violation = exclusion.check(direct_route, [report_near_direct], [])

    assert violation is not None
    assert violation.reason is ViolationReason.NEAR_REPORT
    assert violation.source_index == 0
    # first sample walking north that enters the 120 m radius
    assert 50.0 <= violation.distance_m <= 120.0
    assert violation.sample.lat < report_near_direct.coordinate.lat


def test_clear_route_has_no_violation(exclusion, direct_route):
    reports = [report_at(offset(ORIGIN, 500, 500))]
    news = [news_at(offset(ORIGIN, 200, -500), severity=4)]
    assert exclusion.check(direct_route, reports, news) is None


def test_no_sources_never_violates(exclusion, direct_route):
    assert exclusion.check(direct_route, [], []) is None


def test_severe_news_within_hard_radius(exclusion, direct_route):
    news = [news_at(offset(ORIGIN, 500, 600)), news_at(offset(ORIGIN, 500, 150), severity=4)]
    violation = exclusion.check(direct_route, [], news)

    assert violation.reason is ViolationReason.SEVERE_NEWS
    assert violation.source_index == 1


def test_non_severe_news_is_not_a_no_go_zone(exclusion, direct_route):
    news = [news_at(offset(ORIGIN, 500, 20), severity=3)]
    assert exclusion.check(direct_route, [], news) is None


def test_severity_threshold_is_configurable(direct_route):
    news = [news_at(offset(ORIGIN, 500, 20), severity=3)]
    strict = ExclusionFilter(RoutingConfig(severe_severity_threshold=3))
    assert strict.check(direct_route, [], news).reason is ViolationReason.SEVERE_NEWS


def test_short_incursion_between_distant_vertices(exclusion):
    # Two vertices 2 km apart; the report sits 110 m off the middle of the segment
    long_leg = route(straight_north(ORIGIN, 2000.0))
    report = report_at(offset(ORIGIN, 1006, 110))
    assert exclusion.check(long_leg, [report], []) is not None


def test_first_violation_in_route_order(exclusion, direct_route):
    reports = [report_at(offset(ORIGIN, 900, 10))]
    news = [news_at(offset(ORIGIN, 100, 10), severity=4)]

    violation = exclusion.check(direct_route, reports, news)

    assert violation.reason is ViolationReason.SEVERE_NEWS
    assert violation.sample_index < 20


def test_report_checked_before_news_at_same_sample(exclusion, direct_route):
    spot = offset(ORIGIN, 0, 10)
    violation = exclusion.check(direct_route, [report_at(spot)], [news_at(spot, severity=4)])
    assert violation.reason is ViolationReason.NEAR_REPORT
    assert violation.sample_index == 0


def test_is_excluded(exclusion, direct_route, detour_route, report_near_direct):
    assert exclusion.is_excluded(direct_route, [report_near_direct], [])
    assert not exclusion.is_excluded(detour_route, [report_near_direct], [])
