"""
Route lookup: the only part of freight that talks to the network.

Two ways to turn origin/destination CEPs into a one-way distance:
- "maps": BrasilAPI CEP -> coordinates, then Google Directions driving distance.
  Google does not give toll prices, so tolls come back as 0.
- "ai":   ask Gemini for distance and toll estimate as JSON.

Every failure (bad CEP, no route, denied key, timeout, junk JSON) surfaces as
RouteResolutionError with a message the user can read. The freight model
never sees these errors; without a distance it simply prices freight at 0.
"""

import json
import logging
import math
import re
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass

from .config import settings

logger = logging.getLogger(__name__)

MODES = ("ai", "maps")

DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/%s:generateContent?key=%s"


class RouteResolutionError(Exception):
    """Route could not be resolved. str(e) is safe to show to the user."""


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def as_param(self) -> str:
        return "%s,%s" % (self.latitude, self.longitude)


@dataclass(frozen=True)
class RouteInfo:
    distance_km: float  # one-way
    toll_amount: float = 0.0

    def to_dict(self) -> dict:
        return {"distance_km": self.distance_km, "toll_amount": self.toll_amount}


# --- CEP helpers ---

def cep_digits(cep: str) -> str:
    return re.sub(r"\D", "", str(cep or ""))


def is_valid_cep(cep: str) -> bool:
    return len(cep_digits(cep)) == 8


def format_cep(cep: str) -> str:
    """'13104096' -> '13104-096'. Extra digits are cut, like the form input does."""
    digits = cep_digits(cep)[:8]
    if len(digits) > 5:
        return "%s-%s" % (digits[:5], digits[5:])
    return digits


def normalize_cep(cep: str) -> str:
    digits = cep_digits(cep)
    if len(digits) != 8:
        raise RouteResolutionError(
            "CEP inválido: %r. Informe os 8 dígitos do CEP." % cep
        )
    return digits


# --- HTTP ---

def _fetch_json(url: str, payload: dict = None) -> dict:
    """
    GET (or POST when payload is given) and decode JSON.
    Raises OSError for network failures, ValueError for undecodable bodies.
    """
    data = None
    headers = {"Accept": "application/json"}
    if payload is not None:
        data = json.dumps(payload).encode("utf-8")
        headers["Content-Type"] = "application/json"

    req = urllib.request.Request(
        url,
        data=data,
        headers=headers,
        method="POST" if payload is not None else "GET",
    )
    with urllib.request.urlopen(req, timeout=settings.ROUTE_TIMEOUT_SECONDS) as response:
        return json.loads(response.read())


# --- BrasilAPI ---

def get_coordinates_for_cep(cep: str) -> Coordinates:
    digits = normalize_cep(cep)
    url = "%s/%s" % (settings.CEP_API_URL.rstrip("/"), digits)

    try:
        data = _fetch_json(url)
    except urllib.error.HTTPError as e:
        logger.warning("CEP lookup failed for %s: HTTP %s", digits, e.code)
        raise RouteResolutionError(
            "Não foi possível encontrar o CEP %s. Verifique o número digitado." % format_cep(digits)
        ) from e
    except (OSError, ValueError) as e:
        logger.warning("CEP lookup failed for %s: %s", digits, e)
        raise RouteResolutionError("Falha ao consultar o serviço de CEP.") from e

    try:
        coords = data["location"]["coordinates"]
        result = Coordinates(
            latitude=float(coords["latitude"]),
            longitude=float(coords["longitude"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("CEP %s has no coordinates: %s", digits, data)
        raise RouteResolutionError(
            "Coordenadas não encontradas para o CEP %s." % format_cep(digits)
        ) from e

    logger.info("CEP %s -> %s", digits, result.as_param())
    return result


# --- Google Directions ---

def get_route_distance(origin: Coordinates, destination: Coordinates) -> float:
    """One-way driving distance in km."""
    api_key = settings.GOOGLE_MAPS_API_KEY
    if not api_key:
        raise RouteResolutionError(
            "A chave de API do Google Maps não está configurada (GOOGLE_MAPS_API_KEY)."
        )

    query = urllib.parse.urlencode({
        "origin": origin.as_param(),
        "destination": destination.as_param(),
        "key": api_key,
    })

    try:
        data = _fetch_json("%s?%s" % (DIRECTIONS_URL, query))
    except (OSError, ValueError) as e:
        logger.warning("Google Directions request failed: %s", e)
        raise RouteResolutionError("Falha ao comunicar com a API do Google Maps.") from e

    if not isinstance(data, dict):
        raise RouteResolutionError("Resposta inesperada da API do Google Maps.")
    status = data.get("status")
    if status == "OK":
        try:
            meters = data["routes"][0]["legs"][0]["distance"]["value"]
        except (KeyError, IndexError, TypeError) as e:
            raise RouteResolutionError("Distância não encontrada na resposta da rota.") from e
        if not isinstance(meters, (int, float)) or not math.isfinite(meters):
            raise RouteResolutionError("Distância não encontrada na resposta da rota.")
        return meters / 1000.0

    logger.warning("Google Directions status %s: %s", status, data.get("error_message", ""))
    if status == "ZERO_RESULTS":
        raise RouteResolutionError(
            "Não foi possível encontrar uma rota de carro entre os CEPs informados."
        )
    if status == "REQUEST_DENIED":
        raise RouteResolutionError(
            "A solicitação para o Google Maps foi negada. "
            "Verifique se a chave de API é válida e habilitada."
        )
    raise RouteResolutionError(
        ("Erro do Google Maps: %s. %s" % (status, data.get("error_message", ""))).strip()
    )


# --- Gemini ---

def _build_route_prompt(origin_cep: str, destination_cep: str) -> str:
    return (
        "Você é um assistente de logística no Brasil. Estime a rota de carro "
        "(caminhão leve) entre o CEP de origem %s e o CEP de destino %s.\n"
        "Responda APENAS com JSON válido, sem explicações, no formato:\n"
        '{"distance_km": <distância só de ida em km>, '
        '"toll_cost": <soma dos pedágios só de ida em reais>}\n'
        "Se não houver pedágios, use 0."
    ) % (format_cep(origin_cep), format_cep(destination_cep))


def _call_gemini(prompt: str) -> str:
    """Call Gemini and return the text part. Raises RouteResolutionError."""
    api_key = settings.GEMINI_API_KEY
    if not api_key:
        raise RouteResolutionError("GEMINI_API_KEY não configurada.")

    url = GEMINI_URL % (settings.GEMINI_MODEL, api_key)
    payload = {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": 0.1,
            "responseMimeType": "application/json",
        },
    }

    try:
        result = _fetch_json(url, payload)
    except urllib.error.HTTPError as e:
        error_body = e.read().decode("utf-8", errors="replace")
        logger.warning("Gemini API error %s: %s", e.code, error_body[:300])
        raise RouteResolutionError("Erro da API Gemini (HTTP %s)." % e.code) from e
    except (OSError, ValueError) as e:
        logger.warning("Gemini call failed: %s", e)
        raise RouteResolutionError("Falha ao comunicar com a API Gemini.") from e

    try:
        return result["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise RouteResolutionError("Resposta da IA em formato inesperado.") from e


def parse_route_response(response_text: str) -> RouteInfo:
    """Parse '{"distance_km": .., "toll_cost": ..}', also when wrapped in prose or ``` fences."""
    try:
        data = json.loads(response_text)
    except (json.JSONDecodeError, TypeError):
        match = re.search(r"\{[\s\S]*\}", response_text or "")
        if not match:
            logger.warning("Could not find JSON object in AI route response")
            raise RouteResolutionError("A IA não retornou uma rota válida.")
        try:
            data = json.loads(match.group())
        except json.JSONDecodeError as e:
            logger.warning("Failed to parse extracted JSON from AI route response")
            raise RouteResolutionError("A IA não retornou uma rota válida.") from e

    if not isinstance(data, dict):
        raise RouteResolutionError("A IA não retornou uma rota válida.")

    try:
        distance = float(data.get("distance_km", data.get("distance")))
        tolls = float(data.get("toll_cost", data.get("tolls", 0)) or 0)
    except (TypeError, ValueError) as e:
        raise RouteResolutionError("A IA retornou valores de rota inválidos.") from e

    if not math.isfinite(distance) or not math.isfinite(tolls):
        raise RouteResolutionError("A IA retornou valores de rota inválidos.")
    if distance <= 0:
        raise RouteResolutionError("A IA não encontrou uma rota entre os CEPs informados.")
    return RouteInfo(distance_km=distance, toll_amount=max(tolls, 0.0))


def get_route_info_from_gemini(origin_cep: str, destination_cep: str) -> RouteInfo:
    origin = normalize_cep(origin_cep)
    destination = normalize_cep(destination_cep)
    info = parse_route_response(_call_gemini(_build_route_prompt(origin, destination)))
    logger.info("AI route %s -> %s: %.1f km, tolls %.2f",
                origin, destination, info.distance_km, info.toll_amount)
    return info


# --- Single entry point ---

def resolve_route(origin: str, destination: str, mode: str = "ai") -> RouteInfo:
    """
    One-way distance (km) and tolls (BRL) between two CEPs.
    Raises RouteResolutionError on any failure.
    """
    if mode not in MODES:
        raise RouteResolutionError("Modo de rota desconhecido: %s" % mode)

    if mode == "ai":
        return get_route_info_from_gemini(origin, destination)

    origin_coords = get_coordinates_for_cep(origin)
    destination_coords = get_coordinates_for_cep(destination)
    distance = get_route_distance(origin_coords, destination_coords)
    logger.info("Maps route %s -> %s: %.1f km", origin, destination, distance)
    return RouteInfo(distance_km=distance, toll_amount=0.0)
