"""
Data model, loading and geographic utilities.

This module contains:
- Immutable value types (coordinates, incidents, routes, clusters)
- Incident loading from JSON/GeoJSON and the report database
- Distance calculations
"""

from .models import (
    Coordinate,
    IncidentReport,
    NewsIncident,
    RouteCandidate,
    ScoredRoute,
    RankingResult,
    Cluster,
    Violation,
    ViolationReason,
    IncidentContext
)
from .distance_utils import haversine_distance, distance, interpolate, polyline_length, line_bounds
from .data_loader import load_reports, load_news, load_candidates, parse_timestamp
from .report_store import ReportStore

__all__ = [
    'Coordinate',
    'IncidentReport',
    'NewsIncident',
    'RouteCandidate',
    'ScoredRoute',
    'RankingResult',
    'Cluster',
    'Violation',
    'ViolationReason',
    'IncidentContext',
    'haversine_distance',
    'distance',
    'interpolate',
    'polyline_length',
    'line_bounds',
    'load_reports',
    'load_news',
    'load_candidates',
    'parse_timestamp',
    'ReportStore'
]
