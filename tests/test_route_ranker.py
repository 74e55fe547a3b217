import dataclasses

import pytest

from safe_routing.algorithms.ranking.route_ranker import RouteRanker, rank_routes
from safe_routing.config.routing_config import RoutingConfig
from safe_routing.data.models import ViolationReason
from safe_routing.errors import AllExcludedWarning, NoCandidatesError

from geo_helpers import ORIGIN, news_at, offset, report_at, route, straight_north


@pytest.fixture
def ranker(config):
    return RouteRanker(config)


def _three_routes(durations):
    """Parallel 1 km routes 500 m apart so nothing near one touches another."""
    return [
        route(tuple(offset(c, 0, i * 500) for c in straight_north(ORIGIN, 1000.0)), duration_s=d)
        for i, d in enumerate(durations)
    ]


def test_empty_candidates_is_fatal(ranker):
    with pytest.raises(NoCandidatesError):
        ranker.rank([], [], [])


def test_ranks_by_ascending_score(ranker, now):
    # given in order C, A, B with A fastest
    candidates = _three_routes([900.0, 300.0, 600.0])

    result = ranker.rank(candidates, [], [], now)

    assert [r.candidate_index for r in result.routes] == [1, 2, 0]
    ranks = {r.candidate_index: r.rank for r in result.routes}
    assert ranks == {1: 0, 2: 1, 0: 2}
    scores = [r.score for r in result.routes]
    assert scores == sorted(scores)
    assert not result.all_excluded


def test_ranks_are_contiguous(ranker, now):
    result = ranker.rank(_three_routes([500.0, 400.0, 450.0]), [], [], now)
    assert sorted(r.rank for r in result.routes) == [0, 1, 2]


def test_ties_keep_provider_order(ranker, now):
    result = ranker.rank(_three_routes([600.0, 600.0, 600.0]), [], [], now)
    assert [r.candidate_index for r in result.routes] == [0, 1, 2]


def test_all_excluded_falls_back_to_every_candidate(ranker, now):
    candidates = _three_routes([900.0, 300.0, 600.0])
    # one report on each route
    reports = [report_at(offset(ORIGIN, 500, i * 500), str(i)) for i in range(3)]

    with pytest.warns(AllExcludedWarning):
        result = ranker.rank(candidates, reports, [], now)

    assert result.all_excluded
    assert len(result.routes) == 3
    assert set(result.violations) == {0, 1, 2}


def test_excluded_routes_are_dropped_not_downranked(ranker, direct_route, detour_route,
                                                    report_near_direct, now):
    result = ranker.rank([direct_route, detour_route], [report_near_direct], [], now)

    assert len(result.routes) == 1
    assert result.best.candidate is detour_route
    assert result.best.rank == 0
    assert result.violations[0].reason is ViolationReason.NEAR_REPORT
    assert not result.all_excluded


def test_risk_outweighs_modest_time_savings(ranker, now):
    direct = route(straight_north(ORIGIN, 1000.0), duration_s=700.0)
    detour = route(
        (ORIGIN, offset(ORIGIN, 0, -400), offset(ORIGIN, 1000, -400), offset(ORIGIN, 1000, 0)),
        duration_s=1300.0
    )
    # near the direct route but not severe enough to exclude it
    news = [news_at(offset(ORIGIN, 500, 100), severity=3)]

    result = ranker.rank([direct, detour], [], news, now)

    assert [r.candidate_index for r in result.routes] == [1, 0]
    assert result.routes[1].risk_index > 0
    assert result.routes[0].risk_index == 0

    time_only = RouteRanker(RoutingConfig(risk_weight=0.0)).rank([direct, detour], [], news, now)
    assert time_only.best.candidate_index == 0


def test_score_formula(ranker, now):
    candidate = route(straight_north(ORIGIN, 1000.0), duration_s=700.0)
    news = [news_at(offset(ORIGIN, 500, 100), severity=3)]

    scored = ranker.rank([candidate], [], news, now).best

    assert scored.score == pytest.approx(700.0 + 350.0 * scored.risk_index)
    assert scored.duration_s == 700.0


def test_palette_cycles():
    config = RoutingConfig(route_palette=('#111111', '#222222'))
    result = RouteRanker(config).rank(_three_routes([100.0, 200.0, 300.0]))
    assert [r.color for r in result.routes] == ['#111111', '#222222', '#111111']


def test_scored_routes_are_immutable(ranker, now):
    best = ranker.rank(_three_routes([100.0, 200.0, 300.0]), [], [], now).best
    with pytest.raises(dataclasses.FrozenInstanceError):
        best.rank = 5


def test_reranking_builds_a_new_result(ranker, now):
    candidates = _three_routes([100.0, 200.0, 300.0])
    first = ranker.rank(candidates, [], [], now)
    second = ranker.rank(candidates, [], [], now)
    assert first is not second
    assert first.routes == second.routes


def test_steps_are_passed_through(ranker, now):
    steps = ({'maneuver': 'depart'}, {'maneuver': 'arrive'})
    candidate = dataclasses.replace(route(straight_north(ORIGIN, 200.0)), steps=steps)
    assert ranker.rank([candidate], [], [], now).best.candidate.steps == steps


def test_end_to_end_scenario(direct_route, detour_route, report_near_direct):
    # X is faster but passes 50 m from a report; Y stays over 300 m away
    result = rank_routes([direct_route, detour_route], [report_near_direct], [])

    assert result.best.candidate_index == 1
    assert 0 in result.violations
