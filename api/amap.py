"""
Cliente del servicio web de AMap (Gaode): geocodificación, rutas en coche y
búsqueda de divisiones administrativas.

El cliente se carga una sola vez por proceso (load_amap) y los manejadores de
geocodificación y rutas se crean de forma perezosa y quedan en memoria.
"""
import hashlib
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

import config
from geo_utils import parse_lnglat, parse_polyline

logger = logging.getLogger(__name__)

URL_GEOCODE = "/v3/geocode/geo"
URL_DRIVING = "/v3/direction/driving"
URL_DISTRICT = "/v3/config/district"

LngLat = Tuple[float, float]

# --- Estado en memoria: instancias ya inicializadas ---
_amap_instance: Optional["AmapClient"] = None
_geocoder: Optional["Geocoder"] = None
_driving: Optional["Driving"] = None


class AmapError(Exception):
    def __init__(self, kind: str, info: Optional[str] = None, status_code: Optional[int] = None):
        self.kind = kind
        self.info = info
        self.status_code = status_code
        super().__init__(info or kind)


def sign_params(params: Dict[str, Any], secret: str) -> str:
    """
    Firma digital de AMap: md5 de "k1=v1&k2=v2..." ordenado por clave + secreto
    """
    query = "&".join(f"{k}={params[k]}" for k in sorted(params))
    return hashlib.md5(f"{query}{secret}".encode("utf-8")).hexdigest()


class AmapClient:
    """Acceso HTTP al servicio web de AMap."""

    def __init__(
        self,
        api_key: str,
        security_code: Optional[str] = None,
        base_url: str = config.AMAP_BASE_URL,
        timeout: float = config.AMAP_TIMEOUT_SECONDS,
    ):
        self.api_key = api_key
        self.security_code = security_code or None
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def request(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        query = {k: v for k, v in (params or {}).items() if v is not None}
        query["key"] = self.api_key
        if self.security_code:
            query["sig"] = sign_params(query, self.security_code)

        logger.debug(f"AMap GET {endpoint}")

        try:
            r = requests.get(f"{self.base_url}{endpoint}", params=query, timeout=self.timeout)
        except requests.Timeout:
            raise AmapError("network", "timeout")
        except requests.RequestException as e:
            raise AmapError("network", str(e))

        if r.status_code >= 400:
            raise AmapError("http", f"HTTP {r.status_code} en {endpoint}", r.status_code)

        try:
            data = r.json()
        except ValueError:
            raise AmapError("badjson", f"Respuesta no JSON en {endpoint}")

        # AMap responde status "1" en éxito y "0" con un texto en info
        if str(data.get("status")) != "1":
            raise AmapError("status", str(data.get("info") or "UNKNOWN_ERROR"))
        return data

    def geocoder(self) -> "Geocoder":
        return Geocoder(self)

    def driving(self, **kwargs) -> "Driving":
        return Driving(self, **kwargs)

    def district_search(self, **kwargs) -> "DistrictSearch":
        return DistrictSearch(self, **kwargs)


class Geocoder:
    def __init__(self, client: AmapClient, city: Optional[str] = None):
        self.client = client
        self.city = city

    def get_location(self, address: str) -> LngLat:
        data = self.client.request(URL_GEOCODE, {"address": address, "city": self.city})
        geocodes = data.get("geocodes") or []
        if not geocodes:
            raise AmapError("no_result", f"Sin resultados para {address!r}")
        location = parse_lnglat(geocodes[0].get("location", ""))
        if location is None:
            raise AmapError("no_result", f"Coordenadas inválidas para {address!r}")
        return location


class Driving:
    def __init__(self, client: AmapClient, strategy: int = 0, extensions: str = "base"):
        self.client = client
        self.strategy = strategy
        self.extensions = extensions

    def search(self, origin: LngLat, dest: LngLat) -> Dict[str, Any]:
        """Devuelve el bloque "route" de la respuesta (con al menos un path)."""
        data = self.client.request(
            URL_DRIVING,
            {
                "origin": f"{origin[0]},{origin[1]}",
                "destination": f"{dest[0]},{dest[1]}",
                "strategy": self.strategy,
                "extensions": self.extensions,
            },
        )
        route = data.get("route") or {}
        if not route.get("paths"):
            raise AmapError("no_result", str(data.get("info") or "Driving plan query failed"))
        return route


class DistrictSearch:
    def __init__(self, client: AmapClient, level: str = "country", subdistrict: int = 1, extensions: str = "base"):
        self.client = client
        self.level = level
        self.subdistrict = subdistrict
        self.extensions = extensions

    def search(self, keywords: str) -> Dict[str, Any]:
        """
        Busca divisiones por nombre o adcode

        El servicio web no admite "level" como parámetro; se aplica sobre la
        respuesta, descartando las divisiones de primer nivel de otro nivel.
        """
        data = self.client.request(
            URL_DISTRICT,
            {
                "keywords": keywords,
                "subdistrict": self.subdistrict,
                "extensions": self.extensions,
            },
        )
        if not self.level:
            return data
        districts = [d for d in data.get("districts") or [] if d.get("level", self.level) == self.level]
        return dict(data, districts=districts)


def load_amap(api_key: str) -> AmapClient:
    """
    Carga el cliente AMap una única vez y lo devuelve desde caché después

    Args:
        api_key: Clave del servicio web

    Returns:
        Instancia compartida de AmapClient
    """
    global _amap_instance
    if _amap_instance is not None:
        return _amap_instance

    if not api_key:
        logger.error("AMAP_KEY no está configurada")
        raise AmapError("missing_key", "AMAP_KEY is not configured")

    _amap_instance = AmapClient(api_key, security_code=config.AMAP_SECURITY or None)
    logger.info("Cliente AMap inicializado")
    return _amap_instance


def reset_amap_cache() -> None:
    """Olvida el cliente y los manejadores cacheados."""
    global _amap_instance, _geocoder, _driving
    _amap_instance = None
    _geocoder = None
    _driving = None


def geocode(address_or_coord: str) -> LngLat:
    """
    Dirección o cadena "lng,lat" -> (lng, lat)

    Si la entrada ya son coordenadas no se consulta el servicio.
    """
    global _geocoder
    parsed = parse_lnglat(address_or_coord)
    if parsed is not None:
        return parsed

    if _geocoder is None:
        _geocoder = load_amap(config.AMAP_KEY).geocoder()

    try:
        return _geocoder.get_location(address_or_coord)
    except AmapError as e:
        logger.warning(f"Geocodificación fallida para {address_or_coord!r}: {e.kind}")
        raise AmapError(e.kind, f"Geocoding failed for address: {address_or_coord}", e.status_code) from e


@dataclass
class PlanResult:
    path: List[LngLat]
    distance: float  # metros
    duration: float  # segundos
    routes: List[Dict[str, Any]] = field(default_factory=list)


def _as_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def plan_driving(origin: LngLat, dest: LngLat) -> PlanResult:
    """
    Ruta en coche entre dos puntos

    La polilínea resultante concatena los tramos de todos los pasos de la
    primera ruta.
    """
    global _driving
    if _driving is None:
        _driving = load_amap(config.AMAP_KEY).driving()

    route = _driving.search(origin, dest)
    paths = route["paths"]
    first = paths[0]

    path: List[LngLat] = []
    for step in first.get("steps") or []:
        path.extend(parse_polyline(step.get("polyline", "")))

    logger.info(f"Ruta calculada: {len(path)} puntos, {first.get('distance')} m")
    return PlanResult(
        path=path,
        distance=_as_number(first.get("distance")),
        duration=_as_number(first.get("duration")),
        routes=paths,
    )
