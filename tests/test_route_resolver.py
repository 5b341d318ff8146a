"""
Route lookup tests: all HTTP mocked at urllib.request.urlopen.

Tests:
1-3.   CEP helpers
4-6.   BrasilAPI coordinates (ok, unknown CEP, missing coordinates)
7-10.  Google Directions (ok, ZERO_RESULTS, REQUEST_DENIED, missing key)
11-15. Gemini route parsing (clean JSON, fenced JSON, junk, bad and non-finite numbers)
16-20. resolve_route entry point, dropped connections, undecodable bodies
"""

import io
import json
import urllib.error
from unittest.mock import patch, MagicMock

import pytest

from backend.config import settings
from backend.route_resolver import (
    Coordinates, RouteInfo, RouteResolutionError,
    format_cep, get_coordinates_for_cep, get_route_distance, is_valid_cep,
    normalize_cep, parse_route_response, resolve_route,
)


def _mock_response(data):
    """urlopen() context manager returning JSON bytes."""
    response = MagicMock()
    response.read.return_value = json.dumps(data).encode("utf-8")
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


def _gemini_payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _brasilapi_payload(lat, lon):
    return {
        "cep": "13104096",
        "city": "Campinas",
        "location": {"type": "Point", "coordinates": {"latitude": lat, "longitude": lon}},
    }


# ============================================================
# CEP helpers
# ============================================================

def test_format_cep():
    assert format_cep("13104096") == "13104-096"
    assert format_cep("13104-096") == "13104-096"
    assert format_cep("131") == "131"
    assert format_cep("1310409612") == "13104-096"


def test_is_valid_cep():
    assert is_valid_cep("13104-096")
    assert is_valid_cep("01310 100")
    assert not is_valid_cep("1310-409")
    assert not is_valid_cep("")
    assert not is_valid_cep(None)


def test_normalize_cep_rejects_short():
    assert normalize_cep("13104-096") == "13104096"
    with pytest.raises(RouteResolutionError, match="CEP inválido"):
        normalize_cep("123")


# ============================================================
# BrasilAPI
# ============================================================

def test_coordinates_for_cep():
    with patch("urllib.request.urlopen",
               return_value=_mock_response(_brasilapi_payload("-22.85", "-47.05"))) as mock_open:
        coords = get_coordinates_for_cep("13104-096")
    assert coords == Coordinates(latitude=-22.85, longitude=-47.05)
    request = mock_open.call_args[0][0]
    assert request.full_url.endswith("/13104096")


def test_unknown_cep_raises():
    error = urllib.error.HTTPError("url", 404, "Not Found", {}, io.BytesIO(b"{}"))
    with patch("urllib.request.urlopen", side_effect=error):
        with pytest.raises(RouteResolutionError, match="Não foi possível encontrar o CEP"):
            get_coordinates_for_cep("99999-999")


def test_cep_without_coordinates_raises():
    with patch("urllib.request.urlopen", return_value=_mock_response({"cep": "13104096", "location": {}})):
        with pytest.raises(RouteResolutionError, match="Coordenadas não encontradas"):
            get_coordinates_for_cep("13104-096")


# ============================================================
# Google Directions
# ============================================================

ORIGIN = Coordinates(-22.85, -47.05)
DESTINATION = Coordinates(-23.55, -46.63)


def test_route_distance_converts_meters_to_km():
    payload = {"status": "OK", "routes": [{"legs": [{"distance": {"value": 98500, "text": "98,5 km"}}]}]}
    with patch.object(settings, "GOOGLE_MAPS_API_KEY", "test-key"):
        with patch("urllib.request.urlopen", return_value=_mock_response(payload)) as mock_open:
            assert get_route_distance(ORIGIN, DESTINATION) == pytest.approx(98.5)
    url = mock_open.call_args[0][0].full_url
    assert "key=test-key" in url
    assert "origin=-22.85%2C-47.05" in url


def test_route_zero_results():
    with patch.object(settings, "GOOGLE_MAPS_API_KEY", "test-key"):
        with patch("urllib.request.urlopen", return_value=_mock_response({"status": "ZERO_RESULTS"})):
            with pytest.raises(RouteResolutionError, match="rota de carro"):
                get_route_distance(ORIGIN, DESTINATION)


def test_route_request_denied():
    payload = {"status": "REQUEST_DENIED", "error_message": "API key invalid"}
    with patch.object(settings, "GOOGLE_MAPS_API_KEY", "test-key"):
        with patch("urllib.request.urlopen", return_value=_mock_response(payload)):
            with pytest.raises(RouteResolutionError, match="negada"):
                get_route_distance(ORIGIN, DESTINATION)


def test_route_without_api_key_never_calls_out():
    with patch.object(settings, "GOOGLE_MAPS_API_KEY", ""):
        with patch("urllib.request.urlopen") as mock_open:
            with pytest.raises(RouteResolutionError, match="GOOGLE_MAPS_API_KEY"):
                get_route_distance(ORIGIN, DESTINATION)
    mock_open.assert_not_called()


# ============================================================
# Gemini response parsing
# ============================================================

def test_parse_route_response_clean_json():
    info = parse_route_response('{"distance_km": 98.4, "toll_cost": 23.1}')
    assert info == RouteInfo(distance_km=98.4, toll_amount=23.1)


def test_parse_route_response_fenced_json():
    text = 'Aqui está:\n```json\n{"distance_km": "120", "toll_cost": null}\n```'
    info = parse_route_response(text)
    assert info.distance_km == 120.0
    assert info.toll_amount == 0.0


def test_parse_route_response_junk_raises():
    with pytest.raises(RouteResolutionError):
        parse_route_response("não sei")
    with pytest.raises(RouteResolutionError):
        parse_route_response("[1, 2, 3]")


def test_parse_route_response_bad_numbers_raise():
    with pytest.raises(RouteResolutionError):
        parse_route_response('{"distance_km": "longe"}')
    with pytest.raises(RouteResolutionError):
        parse_route_response('{"distance_km": 0, "toll_cost": 10}')


def test_parse_route_response_non_finite_numbers_raise():
    with pytest.raises(RouteResolutionError):
        parse_route_response('{"distance_km": NaN, "toll_cost": 0}')
    with pytest.raises(RouteResolutionError):
        parse_route_response('{"distance_km": Infinity}')
    with pytest.raises(RouteResolutionError):
        parse_route_response('{"distance_km": 98.4, "toll_cost": Infinity}')


# ============================================================
# resolve_route
# ============================================================

def test_resolve_route_ai_mode():
    text = json.dumps({"distance_km": 98.4, "toll_cost": 23.1})
    with patch.object(settings, "GEMINI_API_KEY", "test-key"):
        with patch("urllib.request.urlopen", return_value=_mock_response(_gemini_payload(text))) as mock_open:
            info = resolve_route("13104-096", "01310-100", mode="ai")
    assert info.distance_km == pytest.approx(98.4)
    assert info.toll_amount == pytest.approx(23.1)
    body = json.loads(mock_open.call_args[0][0].data)
    prompt = body["contents"][0]["parts"][0]["text"]
    assert "13104-096" in prompt
    assert "01310-100" in prompt


def test_resolve_route_maps_mode_has_no_tolls():
    responses = [
        _mock_response(_brasilapi_payload(-22.85, -47.05)),
        _mock_response(_brasilapi_payload(-23.55, -46.63)),
        _mock_response({"status": "OK", "routes": [{"legs": [{"distance": {"value": 100000}}]}]}),
    ]
    with patch.object(settings, "GOOGLE_MAPS_API_KEY", "test-key"):
        with patch("urllib.request.urlopen", side_effect=responses):
            info = resolve_route("13104-096", "01310-100", mode="maps")
    assert info == RouteInfo(distance_km=100.0, toll_amount=0.0)


def test_resolve_route_failures_are_route_resolution_errors():
    with patch.object(settings, "GEMINI_API_KEY", ""):
        with pytest.raises(RouteResolutionError, match="GEMINI_API_KEY"):
            resolve_route("13104-096", "01310-100", mode="ai")
    with pytest.raises(RouteResolutionError):
        resolve_route("13104-096", "01310-100", mode="teleport")
    with patch.object(settings, "GEMINI_API_KEY", "test-key"):
        with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("timed out")):
            with pytest.raises(RouteResolutionError, match="Gemini"):
                resolve_route("13104-096", "01310-100", mode="ai")


def test_dropped_connection_is_route_resolution_error():
    with patch.object(settings, "GEMINI_API_KEY", "test-key"):
        with patch("urllib.request.urlopen", side_effect=ConnectionResetError("reset by peer")):
            with pytest.raises(RouteResolutionError, match="Gemini"):
                resolve_route("13104-096", "01310-100", mode="ai")


def test_undecodable_body_is_route_resolution_error():
    response = _mock_response({})
    response.read.return_value = b"\x80\x81 not json"
    with patch("urllib.request.urlopen", return_value=response):
        with pytest.raises(RouteResolutionError, match="CEP"):
            get_coordinates_for_cep("13104-096")
