"""
OSRM routing provider adapter.

Sole responsibility: talk to OSRM over HTTP and turn its responses into
RouteCandidate objects. No scoring or ranking happens here, and failed
requests are not retried; the caller decides what to do.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..config.routing_config import RoutingConfig
from ..data.models import Coordinate, RouteCandidate
from ..errors import InputError, ProviderUnavailableError

logger = logging.getLogger(__name__)


class OSRMRoutingProvider:
    """
    Fetches alternative route geometries from an OSRM server.
    """

    def __init__(self, config: Optional[RoutingConfig] = None,
                 session: Optional[requests.Session] = None):
        """
        Args:
            config: Supplies base URL, travel profile and timeout
            session: Optional requests session (connection reuse, testing)
        """
        self.config = config or RoutingConfig()
        self.base_url = self.config.osrm_base_url.rstrip('/')
        self.session = session or requests.Session()

    @staticmethod
    def format_coordinates(coords: List[Coordinate]) -> str:
        """Convert coordinates to OSRM format 'lon,lat;lon,lat;...'"""
        return ';'.join(f"{c.lon},{c.lat}" for c in coords)

    def fetch_routes(self, origin: Coordinate, destination: Coordinate,
                     profile: Optional[str] = None,
                     alternatives: bool = True) -> List[RouteCandidate]:
        """
        Request candidate routes between two points.

        Args:
            origin: Start coordinate
            destination: End coordinate
            profile: OSRM travel profile (defaults to config.osrm_profile)
            alternatives: Ask OSRM for alternative routes

        Returns:
            Route candidates in provider order; empty when OSRM finds no route

        Raises:
            ProviderUnavailableError: On network failure or an OSRM error response
        """
        profile = profile or self.config.osrm_profile
        url = f"{self.base_url}/route/v1/{profile}/{self.format_coordinates([origin, destination])}"
        params = {
            'alternatives': 'true' if alternatives else 'false',
            'geometries': 'geojson',
            'overview': 'full',
            'steps': 'true',
        }

        logger.info(f"Requesting {profile} routes from {origin.as_tuple()} to {destination.as_tuple()}")

        try:
            response = self.session.get(url, params=params, timeout=self.config.osrm_timeout_s)
        except requests.RequestException as e:
            raise ProviderUnavailableError(f"OSRM request failed: {e}", provider="osrm") from e

        try:
            data = response.json()
        except ValueError:
            raise ProviderUnavailableError(
                f"OSRM returned non-JSON response (HTTP {response.status_code})", provider="osrm"
            )

        if not isinstance(data, dict):
            raise ProviderUnavailableError(
                f"OSRM returned an unexpected payload (HTTP {response.status_code})", provider="osrm"
            )

        code = data.get('code')
        if code in ('NoRoute', 'NoSegment'):
            logger.info(f"OSRM found no route ({code})")
            return []
        if response.status_code >= 400 or code != 'Ok':
            raise ProviderUnavailableError(
                f"OSRM error: {data.get('message', code or 'Unknown error')}", provider="osrm"
            )

        try:
            candidates = [self._parse_route(route) for route in data.get('routes') or []]
        except (InputError, KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            raise ProviderUnavailableError(f"OSRM returned a malformed route: {e!r}", provider="osrm") from e

        logger.info(f"OSRM returned {len(candidates)} route candidates")
        return candidates

    @staticmethod
    def _parse_route(route: Dict[str, Any]) -> RouteCandidate:
        """Normalize one OSRM route object."""
        geometry = route.get('geometry') or {}
        coords = geometry.get('coordinates') or []
        if len(coords) < 2:
            raise InputError("OSRM route geometry has fewer than two points")

        steps = [step for leg in route.get('legs', []) for step in leg.get('steps', [])]

        return RouteCandidate(
            coordinates=tuple(Coordinate(c[1], c[0]) for c in coords),
            duration_s=float(route['duration']),
            steps=tuple(steps) if steps else None,
            distance_m=float(route['distance']) if 'distance' in route else None
        )
