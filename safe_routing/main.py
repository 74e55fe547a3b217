#!/usr/bin/env python3
"""
Safety-Aware Routing - Command Line Interface

Rank pre-computed route candidates against incident data, or list report
hotspots.
"""

import argparse
import logging
import sys

from .algorithms import HotspotClusterer, RouteRanker
from .config import RoutingConfig
from .data import load_candidates, load_news, load_reports
from .errors import NoCandidatesError, SafeRoutingError

CONFIG_PRESETS = {
    'balanced': RoutingConfig.create_balanced_config,
    'conservative': RoutingConfig.create_conservative_config,
    'speed': RoutingConfig.create_speed_focused_config,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="safe_routing", description="Safety-aware route ranking")
    parser.add_argument("--config", default="balanced", choices=sorted(CONFIG_PRESETS),
                        help="Configuration preset")
    parser.add_argument("--log-level", default="warning",
                        choices=["debug", "info", "warning", "error"], help="Log level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    rank = subparsers.add_parser("rank", help="Rank route candidates")
    rank.add_argument("candidates", help="JSON file with route candidates")
    rank.add_argument("--reports", help="JSON/GeoJSON file with incident reports")
    rank.add_argument("--news", help="JSON/GeoJSON file with news incidents")

    hotspots = subparsers.add_parser("hotspots", help="List report hotspots")
    hotspots.add_argument("reports", help="JSON/GeoJSON file with incident reports")
    hotspots.add_argument("--radius", type=float, default=None, help="Cluster radius in meters")
    hotspots.add_argument("--min-count", type=int, default=None, help="Minimum reports per hotspot")
    return parser


def run_rank(args, config: RoutingConfig) -> int:
    candidates = load_candidates(args.candidates)
    reports = load_reports(args.reports) if args.reports else []
    news = load_news(args.news) if args.news else []

    try:
        result = RouteRanker(config).rank(candidates, reports, news)
    except NoCandidatesError as e:
        print(f"❌ {e}")
        return 1

    if result.all_excluded:
        print("⚠ Every route crosses an exclusion zone - showing all routes anyway")

    print(f"{'rank':>4}  {'route':>5}  {'time':>8}  {'risk':>6}  {'score':>10}  color")
    for route in result.routes:
        print(f"{route.rank:>4}  {route.candidate_index:>5}  {route.duration_s / 60:>6.1f}m  "
              f"{route.risk_index:>6.1f}  {route.score:>10.1f}  {route.color}")

    for index, violation in sorted(result.violations.items()):
        print(f"   excluded route {index}: {violation.reason.value} "
              f"({violation.distance_m:.0f}m)")
    return 0


def run_hotspots(args, config: RoutingConfig) -> int:
    reports = load_reports(args.reports)
    clusterer = HotspotClusterer(config)
    hotspots = clusterer.hotspots(reports, args.radius, args.min_count)

    print(f"📍 {len(hotspots)} hotspots from {len(reports)} reports")
    for cluster in sorted(hotspots, key=lambda c: -c.member_count):
        radius = clusterer.visualization_radius(cluster.member_count, args.min_count)
        print(f"   ({cluster.centroid.lat:.5f}, {cluster.centroid.lon:.5f})  "
              f"{cluster.member_count} reports  radius {radius:.0f}m")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = CONFIG_PRESETS[args.config]()
    try:
        if args.command == "rank":
            return run_rank(args, config)
        return run_hotspots(args, config)
    except (SafeRoutingError, FileNotFoundError) as e:
        print(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
