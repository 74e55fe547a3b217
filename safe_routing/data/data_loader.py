"""
Incident data loading with validation.

Accepts either a plain JSON list of records or a GeoJSON FeatureCollection
of Point features.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from ..errors import InputError
from .models import Coordinate, IncidentReport, NewsIncident, RouteCandidate

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp into an aware UTC datetime.

    Accepts datetimes, ISO-8601 / SQLite `YYYY-MM-DD HH:MM:SS` strings and
    epoch numbers (seconds, or milliseconds when implausibly large).
    Naive values are taken to be UTC.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        seconds = value / 1000.0 if value > 1e11 else float(value)
        parsed = datetime.fromtimestamp(seconds, tz=timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InputError(f"Unrecognized timestamp: {value!r}")
    else:
        raise InputError(f"Unrecognized timestamp: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _read_records(data_path: str) -> List[Dict[str, Any]]:
    if not os.path.exists(data_path):
        raise FileNotFoundError(f"Incident data file not found: {data_path}")

    try:
        with open(data_path, 'r') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InputError(f"Invalid JSON format in incident data file: {e}")

    return records_from_json(data)


def records_from_json(data: Union[Dict[str, Any], List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """
    Flatten a JSON list or GeoJSON FeatureCollection into plain records
    with 'lat' and 'lon' keys.
    """
    if isinstance(data, list):
        return data

    if not isinstance(data, dict) or 'features' not in data:
        raise InputError("Incident data must be a JSON list or GeoJSON with 'features' key")

    records = []
    for feature in data['features']:
        geometry = feature.get('geometry') or {}
        if geometry.get('type') != 'Point':
            continue
        coords = geometry.get('coordinates') or []
        if len(coords) < 2:
            continue
        record = dict(feature.get('properties') or {})
        record.setdefault('id', feature.get('id'))
        record['lon'], record['lat'] = coords[0], coords[1]
        records.append(record)
    return records


def report_from_record(record: Dict[str, Any], fallback_id: Any = None) -> IncidentReport:
    """Build an IncidentReport from a {'id', 'lat', 'lon', ...} record."""
    if record.get('lat') is None or record.get('lon') is None:
        raise InputError("Missing coordinates")

    report_id = record.get('id')
    if report_id is None:
        report_id = fallback_id

    return IncidentReport(
        id=str(report_id),
        coordinate=Coordinate(record['lat'], record['lon']),
        description=record.get('description') or record.get('desc') or "",
        occurred_at=parse_timestamp(
            record.get('occurred_at') or record.get('time') or record.get('timestamp')
        )
    )


def news_from_record(record: Dict[str, Any]) -> NewsIncident:
    """Build a NewsIncident from a {'lat', 'lon', 'severity', ...} record."""
    if record.get('lat') is None or record.get('lon') is None:
        raise InputError("Missing coordinates")

    return NewsIncident(
        coordinate=Coordinate(record['lat'], record['lon']),
        severity=record.get('severity', 1),
        title=record.get('title') or "",
        published_at=parse_timestamp(
            record.get('published_at') or record.get('timestamp') or record.get('time')
        )
    )


def candidate_from_record(record: Dict[str, Any]) -> RouteCandidate:
    """
    Build a RouteCandidate from either
    {'coordinates': [[lat, lon], ...], 'duration_s': ...} or an OSRM-style
    {'geometry': {'coordinates': [[lon, lat], ...]}, 'duration': ...}.
    """
    if 'geometry' in record:
        coords = [Coordinate(c[1], c[0]) for c in record['geometry'].get('coordinates', [])]
    else:
        coords = [Coordinate(c[0], c[1]) for c in record.get('coordinates', [])]

    duration = record.get('duration_s', record.get('duration'))
    if duration is None:
        raise InputError("Route candidate is missing a duration")

    return RouteCandidate(
        coordinates=tuple(coords),
        duration_s=float(duration),
        steps=record.get('steps'),
        distance_m=record.get('distance_m', record.get('distance'))
    )


def load_candidates(data_path: str) -> List[RouteCandidate]:
    """Load route candidates from a JSON list (or an OSRM response with 'routes')."""
    if not os.path.exists(data_path):
        raise FileNotFoundError(f"Route data file not found: {data_path}")

    try:
        with open(data_path, 'r') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InputError(f"Invalid JSON format in route data file: {e}")

    records = data.get('routes', []) if isinstance(data, dict) else data
    candidates = [candidate_from_record(record) for record in records]
    logger.info(f"Loaded {len(candidates)} route candidates")
    return candidates


def reports_from_records(records: Iterable[Dict[str, Any]]) -> List[IncidentReport]:
    return [report_from_record(record, fallback_id=i) for i, record in enumerate(records)]


def news_from_records(records: Iterable[Dict[str, Any]]) -> List[NewsIncident]:
    return [news_from_record(record) for record in records]


def load_reports(data_path: str) -> List[IncidentReport]:
    """
    Load incident reports from a JSON or GeoJSON file.

    Args:
        data_path: Path to the data file

    Returns:
        List of IncidentReport

    Raises:
        FileNotFoundError: If the file does not exist
        InputError: If the data format is invalid
    """
    logger.info(f"Loading incident reports from: {data_path}")
    reports = reports_from_records(_read_records(data_path))
    logger.info(f"Loaded {len(reports)} incident reports")
    return reports


def load_news(data_path: str) -> List[NewsIncident]:
    """Load news incidents from a JSON or GeoJSON file."""
    logger.info(f"Loading news incidents from: {data_path}")
    news = news_from_records(_read_records(data_path))
    logger.info(f"Loaded {len(news)} news incidents")
    return news
