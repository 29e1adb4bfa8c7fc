"""
Servicio para consultar QWeather (HeFeng): tiempo actual, previsión diaria y
previsión horaria a partir de coordenadas.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

import config

logger = logging.getLogger(__name__)

URL_GEO_LOOKUP = "/geo/v2/city/lookup"
URL_NOW = "/v7/weather/now"
URL_DAILY_3D = "/v7/weather/3d"
URL_HOURLY_24H = "/v7/weather/24h"


@dataclass
class WeatherInfo:
    """Tiempo actual (con provincia y ciudad) más la previsión de 3 días."""
    now: Dict[str, Any]
    daily: List[Dict[str, Any]] = field(default_factory=list)


def _location_param(lon: float, lat: float) -> str:
    return f"{lon:.2f},{lat:.2f}"


def _get(path: str, params: Dict[str, Any]) -> requests.Response:
    query = dict(params)
    query["key"] = config.QWEATHER_KEY
    logger.debug(f"QWeather GET {path} {params}")
    return requests.get(f"{config.QWEATHER_HOST}{path}", params=query, timeout=config.QWEATHER_TIMEOUT_SECONDS)


def lookup_location(lon: float, lat: float) -> Optional[Dict[str, Any]]:
    """
    Primera ubicación QWeather para unas coordenadas

    Lanza requests.HTTPError si la petición HTTP falla; devuelve None si la
    API responde sin datos.
    """
    r = _get(URL_GEO_LOOKUP, {"location": _location_param(lon, lat)})
    if not r.ok:
        logger.error(f"GeoAPI respondió HTTP {r.status_code}")
        r.raise_for_status()

    data = r.json()
    locations = data.get("location") or []
    if str(data.get("code")) != config.QWEATHER_OK or not locations:
        logger.warning(f"QWeather GeoAPI sin datos: code={data.get('code')}")
        return None
    return locations[0]


def fetch_weather_by_location(lon: float, lat: float) -> Optional[WeatherInfo]:
    """
    Tiempo actual + previsión de 3 días para unas coordenadas

    Args:
        lon: Longitud
        lat: Latitud

    Returns:
        WeatherInfo o None si falta la clave, la API falla o no hay datos
    """
    if not config.QWEATHER_KEY:
        logger.error("QWEATHER_KEY no está configurada")
        return None

    try:
        location = lookup_location(lon, lat)
        if location is None:
            return None

        location_id = location.get("id")
        logger.info(f"LocationID {location_id} | {location.get('adm1')} - {location.get('name')}")

        # Actual y diaria en paralelo
        params = {"location": location_id}
        with ThreadPoolExecutor(max_workers=2) as executor:
            now_future = executor.submit(_get, URL_NOW, params)
            daily_future = executor.submit(_get, URL_DAILY_3D, params)
            now_res = now_future.result()
            daily_res = daily_future.result()

        if not now_res.ok or not daily_res.ok:
            logger.error(f"Tiempo QWeather HTTP now={now_res.status_code} daily={daily_res.status_code}")
            return None

        now_data = now_res.json()
        daily_data = daily_res.json()

        if (
            str(now_data.get("code")) != config.QWEATHER_OK
            or str(daily_data.get("code")) != config.QWEATHER_OK
            or now_data.get("now") is None
            or daily_data.get("daily") is None
        ):
            logger.warning(
                f"QWeather sin datos de tiempo: now={now_data.get('code')} daily={daily_data.get('code')}"
            )
            return None

        now = dict(now_data["now"])
        now["province"] = location.get("adm1")
        now["city"] = location.get("name")

        return WeatherInfo(now=now, daily=list(daily_data["daily"]))

    except Exception as e:
        logger.error(f"Error obteniendo tiempo para {lon},{lat}: {e}")
        return None


def fetch_hourly_24h(lon: float, lat: float) -> List[Dict[str, Any]]:
    """Previsión horaria de 24 h; lista vacía ante cualquier fallo."""
    if not config.QWEATHER_KEY:
        return []

    try:
        location = lookup_location(lon, lat)
        if location is None:
            return []

        r = _get(URL_HOURLY_24H, {"location": location.get("id")})
        if not r.ok:
            logger.error(f"Previsión horaria HTTP {r.status_code}")
            r.raise_for_status()

        data = r.json()
        if str(data.get("code")) == config.QWEATHER_OK and data.get("hourly"):
            return list(data["hourly"])
        return []
    except Exception as e:
        logger.error(f"Error obteniendo previsión horaria para {lon},{lat}: {e}")
        return []
