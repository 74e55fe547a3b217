from unittest.mock import MagicMock

import pytest
import requests

from safe_routing.config.routing_config import RoutingConfig
from safe_routing.data.models import Coordinate
from safe_routing.errors import ProviderUnavailableError
from safe_routing.providers.osrm_provider import OSRMRoutingProvider

ORIGIN = Coordinate(43.6532, -79.3832)
DESTINATION = Coordinate(43.6629, -79.3957)


def _response(payload, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


def _osrm_route(duration=600.0, distance=850.0):
    return {
        'duration': duration,
        'distance': distance,
        'geometry': {'type': 'LineString',
                     'coordinates': [[-79.3832, 43.6532], [-79.39, 43.658], [-79.3957, 43.6629]]},
        'legs': [{'steps': [{'name': 'King St', 'maneuver': {'type': 'depart'}},
                            {'name': '', 'maneuver': {'type': 'arrive'}}]}],
    }


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def provider(session):
    config = RoutingConfig(osrm_base_url="http://osrm.test/", osrm_timeout_s=5.0)
    return OSRMRoutingProvider(config, session=session)


def test_format_coordinates_is_lon_lat():
    assert OSRMRoutingProvider.format_coordinates([ORIGIN, DESTINATION]) == \
        "-79.3832,43.6532;-79.3957,43.6629"


def test_request_url_and_params(provider, session):
    session.get.return_value = _response({'code': 'Ok', 'routes': []})

    provider.fetch_routes(ORIGIN, DESTINATION)

    args, kwargs = session.get.call_args
    assert args[0] == "http://osrm.test/route/v1/foot/-79.3832,43.6532;-79.3957,43.6629"
    assert kwargs['params']['alternatives'] == 'true'
    assert kwargs['params']['geometries'] == 'geojson'
    assert kwargs['timeout'] == 5.0


def test_profile_override(provider, session):
    session.get.return_value = _response({'code': 'Ok', 'routes': []})
    provider.fetch_routes(ORIGIN, DESTINATION, profile='bike', alternatives=False)

    args, kwargs = session.get.call_args
    assert '/route/v1/bike/' in args[0]
    assert kwargs['params']['alternatives'] == 'false'


def test_parses_routes_in_provider_order(provider, session):
    session.get.return_value = _response(
        {'code': 'Ok', 'routes': [_osrm_route(600.0), _osrm_route(540.0, 900.0)]}
    )

    candidates = provider.fetch_routes(ORIGIN, DESTINATION)

    assert [c.duration_s for c in candidates] == [600.0, 540.0]
    first = candidates[0]
    assert first.coordinates[0] == ORIGIN
    assert first.coordinates[-1] == DESTINATION
    assert first.distance_m == 850.0
    assert [s['maneuver']['type'] for s in first.steps] == ['depart', 'arrive']


def test_no_route_is_an_empty_result(provider, session):
    session.get.return_value = _response({'code': 'NoRoute', 'message': 'Impossible route'}, 400)
    assert provider.fetch_routes(ORIGIN, DESTINATION) == []


def test_network_failure(provider, session):
    session.get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(ProviderUnavailableError) as excinfo:
        provider.fetch_routes(ORIGIN, DESTINATION)
    assert excinfo.value.provider == "osrm"


def test_timeout(provider, session):
    session.get.side_effect = requests.Timeout("slow")
    with pytest.raises(ProviderUnavailableError):
        provider.fetch_routes(ORIGIN, DESTINATION)


def test_error_response(provider, session):
    session.get.return_value = _response({'code': 'InvalidQuery', 'message': 'Query string malformed'}, 400)

    with pytest.raises(ProviderUnavailableError, match="Query string malformed"):
        provider.fetch_routes(ORIGIN, DESTINATION)


def test_non_json_response(provider, session):
    response = _response(None, 502)
    response.json.side_effect = ValueError("no json")
    session.get.return_value = response

    with pytest.raises(ProviderUnavailableError, match="502"):
        provider.fetch_routes(ORIGIN, DESTINATION)


def test_route_without_duration_is_a_provider_failure(provider, session):
    route = _osrm_route()
    del route['duration']
    session.get.return_value = _response({'code': 'Ok', 'routes': [route]})

    with pytest.raises(ProviderUnavailableError) as excinfo:
        provider.fetch_routes(ORIGIN, DESTINATION)
    assert excinfo.value.provider == "osrm"
    assert isinstance(excinfo.value.__cause__, KeyError)


def test_single_point_geometry_is_a_provider_failure(provider, session):
    route = _osrm_route()
    route['geometry']['coordinates'] = [[-79.3832, 43.6532]]
    session.get.return_value = _response({'code': 'Ok', 'routes': [route]})

    with pytest.raises(ProviderUnavailableError, match="malformed route"):
        provider.fetch_routes(ORIGIN, DESTINATION)


def test_out_of_range_coordinates_are_a_provider_failure(provider, session):
    route = _osrm_route()
    route['geometry']['coordinates'] = [[-79.3832, 143.6532], [-79.39, 43.658]]
    session.get.return_value = _response({'code': 'Ok', 'routes': [route]})

    with pytest.raises(ProviderUnavailableError):
        provider.fetch_routes(ORIGIN, DESTINATION)


def test_payload_that_is_not_an_object(provider, session):
    session.get.return_value = _response(["Ok"])

    with pytest.raises(ProviderUnavailableError, match="unexpected payload"):
        provider.fetch_routes(ORIGIN, DESTINATION)
