"""
Immutable value types shared by the routing core.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from shapely.geometry import LineString

from ..errors import InputError


@dataclass(frozen=True)
class Coordinate:
    """(latitude, longitude) in degrees, WGS84."""
    lat: float
    lon: float

    def __post_init__(self):
        lat, lon = float(self.lat), float(self.lon)
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise InputError(f"Coordinate must be finite, got ({self.lat}, {self.lon})")
        if not -90.0 <= lat <= 90.0:
            raise InputError(f"Latitude out of range: {lat}")
        if not -180.0 <= lon <= 180.0:
            raise InputError(f"Longitude out of range: {lon}")
        object.__setattr__(self, 'lat', lat)
        object.__setattr__(self, 'lon', lon)

    @classmethod
    def from_lonlat(cls, lon: float, lat: float) -> 'Coordinate':
        return cls(lat, lon)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lon)


@dataclass(frozen=True)
class IncidentReport:
    """A user-submitted incident report. Never mutated by the core."""
    id: str
    coordinate: Coordinate
    description: str = ""
    occurred_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewsIncident:
    """A news-derived incident point with a severity clamped into [1, 4]."""
    coordinate: Coordinate
    severity: int
    title: str = ""
    published_at: Optional[datetime] = None

    def __post_init__(self):
        try:
            severity = int(round(float(self.severity)))
        except (TypeError, ValueError, OverflowError):
            raise InputError(f"Severity must be a finite number, got {self.severity!r}")
        object.__setattr__(self, 'severity', min(4, max(1, severity)))


@dataclass(frozen=True)
class RouteCandidate:
    """
    A route geometry produced by the routing provider.

    `steps` is opaque turn-by-turn data and is passed through untouched.
    """
    coordinates: Tuple[Coordinate, ...]
    duration_s: float
    steps: Optional[Tuple[Any, ...]] = None
    distance_m: Optional[float] = None

    def __post_init__(self):
        coords = tuple(self.coordinates)
        if len(coords) < 2:
            raise InputError("A route candidate needs at least two coordinates")
        if not math.isfinite(self.duration_s) or self.duration_s < 0:
            raise InputError(f"Route duration must be a non-negative number, got {self.duration_s}")
        object.__setattr__(self, 'coordinates', coords)
        if self.steps is not None:
            object.__setattr__(self, 'steps', tuple(self.steps))

    @property
    def line(self) -> LineString:
        """Route as a shapely LineString in (lon, lat) order."""
        return LineString([(c.lon, c.lat) for c in self.coordinates])


class ViolationReason(Enum):
    """Why a route was excluded."""
    NEAR_REPORT = "NearReport"
    SEVERE_NEWS = "SevereNews"


@dataclass(frozen=True)
class Violation:
    reason: ViolationReason
    sample_index: int
    sample: Coordinate
    source_index: int
    distance_m: float


@dataclass(frozen=True)
class ScoredRoute:
    """One ranked route. A new set is built on every ranking call."""
    candidate: RouteCandidate
    risk_index: float
    duration_s: float
    score: float
    rank: int
    color: str
    candidate_index: int

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics for the route."""
        return {
            'rank': self.rank,
            'candidate_index': self.candidate_index,
            'duration_s': round(self.duration_s, 1),
            'risk_index': round(self.risk_index, 2),
            'score': round(self.score, 1),
            'color': self.color,
            'point_count': len(self.candidate.coordinates),
        }


@dataclass(frozen=True)
class RankingResult:
    routes: Tuple[ScoredRoute, ...]
    all_excluded: bool = False
    violations: Dict[int, Violation] = field(default_factory=dict)

    @property
    def best(self) -> ScoredRoute:
        return self.routes[0]


@dataclass(frozen=True)
class Cluster:
    centroid: Coordinate
    member_count: int
    member_indices: Tuple[int, ...] = ()


@dataclass(frozen=True)
class IncidentContext:
    """Immutable snapshot of the incident sets a computation runs against."""
    reports: Tuple[IncidentReport, ...] = ()
    news: Tuple[NewsIncident, ...] = ()

    @classmethod
    def of(cls, reports: Sequence[IncidentReport] = (),
           news: Sequence[NewsIncident] = ()) -> 'IncidentContext':
        return cls(tuple(reports), tuple(news))

    @property
    def is_empty(self) -> bool:
        return not self.reports and not self.news
