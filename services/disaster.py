"""
Avisos de fenómenos adversos de QWeather
"""
import logging
from dataclasses import dataclass
from typing import List

import requests

import config

logger = logging.getLogger(__name__)

URL_WARNING_NOW = "/v7/warning/now"


@dataclass(frozen=True)
class DisasterWarning:
    title: str
    level: str
    type: str
    detail: str


def fetch_disaster_warning(lon: float, lat: float) -> List[DisasterWarning]:
    """
    Avisos vigentes para unas coordenadas

    Args:
        lon: Longitud
        lat: Latitud

    Returns:
        Lista de avisos (vacía si no hay, si falta permiso o si falla la API)
    """
    if not config.QWEATHER_KEY:
        logger.error("QWEATHER_KEY no está configurada")
        return []

    params = {
        "location": f"{lon:.2f},{lat:.2f}",
        "key": config.QWEATHER_KEY,
    }

    try:
        r = requests.get(
            f"{config.QWEATHER_WARNING_HOST}{URL_WARNING_NOW}",
            params=params,
            timeout=config.QWEATHER_TIMEOUT_SECONDS,
        )
        j = r.json()
        if not isinstance(j, dict):
            logger.warning(f"Respuesta de avisos inesperada para {lon},{lat}")
            return []
        code = str(j.get("code"))

        # El plan contratado puede no incluir este servicio
        if code == config.QWEATHER_FORBIDDEN:
            logger.warning("Sin permiso para avisos de QWeather; revisa la suscripción en la consola.")
            return []

        warnings = j.get("warning") or []
        if code == config.QWEATHER_OK and warnings:
            return [
                DisasterWarning(
                    title=str(w.get("title", "")),
                    level=str(w.get("severity", "")),
                    type=str(w.get("typeName", "")),
                    detail=str(w.get("text", "")),
                )
                for w in warnings
            ]
        return []
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Error obteniendo avisos para {lon},{lat}: {e}")
        return []
