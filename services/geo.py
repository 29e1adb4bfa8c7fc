"""
Muestreo de rutas y segmentación por provincias
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests
from shapely.geometry import Point, shape

from config import GEOJSON_TIMEOUT_SECONDS, PROVINCES_GEOJSON, ROUTE_SAMPLE_STEP_METERS
from geo_utils import LngLat, points_along, polyline_length_km

logger = logging.getLogger(__name__)

EMPTY_COLLECTION = {"type": "FeatureCollection", "features": []}


@dataclass(frozen=True)
class ProvinceSegment:
    """Tramo de la ruta dentro de una misma provincia."""
    province: str
    path: List[LngLat]  # Polilínea del tramo
    mid: LngLat  # Punto central, usado para etiquetas


def load_provinces(source: str = PROVINCES_GEOJSON) -> Dict[str, Any]:
    """
    Carga los polígonos provinciales (GeoJSON FeatureCollection)

    Args:
        source: Ruta local o URL http(s)

    Returns:
        FeatureCollection; vacía si no se pudo leer
    """
    try:
        if str(source).startswith(("http://", "https://")):
            r = requests.get(source, timeout=GEOJSON_TIMEOUT_SECONDS)
            r.raise_for_status()
            payload = r.json()
        else:
            with open(source, "r", encoding="utf-8") as f:
                payload = json.load(f)
    except (OSError, ValueError, requests.RequestException) as e:
        logger.warning(f"No se pudieron cargar provincias desde {source}: {e}")
        return dict(EMPTY_COLLECTION, features=[])

    if not isinstance(payload, dict) or not isinstance(payload.get("features"), list):
        logger.warning(f"GeoJSON sin features en {source}")
        return dict(EMPTY_COLLECTION, features=[])
    return payload


def sample_polyline(path: Sequence[LngLat], step_meters: float = ROUTE_SAMPLE_STEP_METERS) -> List[LngLat]:
    """
    Muestreo equidistante (en metros) a lo largo de la polilínea

    Incluye siempre el punto final de la ruta.
    """
    if step_meters <= 0:
        raise ValueError("step_meters debe ser positivo")
    if len(path) < 2:
        return list(path)

    length_m = polyline_length_km(path) * 1000.0
    distances_km: List[float] = []
    d = 0.0
    while d <= length_m:
        distances_km.append(d / 1000.0)
        d += step_meters
    out = points_along(path, distances_km)

    last = tuple(path[-1])
    if not out or tuple(out[-1]) != last:
        out.append(last)
    return out


def _feature_name(feature: Dict[str, Any], name_prop: str) -> Optional[str]:
    props = feature.get("properties") or {}
    name = props.get(name_prop) or props.get("name") or props.get("NAME")
    return str(name) if name else None


def _index_features(provinces_fc: Dict[str, Any], name_prop: str) -> List[Tuple[Optional[str], Any]]:
    index = []
    for feature in provinces_fc.get("features") or []:
        geometry = feature.get("geometry")
        if not geometry:
            continue
        index.append((_feature_name(feature, name_prop), shape(geometry)))
    return index


def _classify(index: List[Tuple[Optional[str], Any]], p: LngLat) -> Optional[str]:
    pt = Point(p)
    for name, geom in index:
        if geom.covers(pt):
            return name or None
    return None


def find_province_of_point(
    provinces_fc: Dict[str, Any],
    p: LngLat,
    name_prop: str = "name",
) -> Optional[str]:
    """Nombre de la primera provincia que contiene el punto (borde incluido)."""
    return _classify(_index_features(provinces_fc, name_prop), p)


def group_by_province(
    provinces_fc: Dict[str, Any],
    path: Sequence[LngLat],
    step_meters: float = ROUTE_SAMPLE_STEP_METERS,
    name_prop: str = "name",
) -> List[ProvinceSegment]:
    """
    Divide la ruta en tramos contiguos por provincia

    Las muestras fuera de cualquier provincia, y los tramos de un solo punto,
    se descartan.
    """
    index = _index_features(provinces_fc, name_prop)
    samples = sample_polyline(path, step_meters)

    segments: List[ProvinceSegment] = []
    current: Optional[str] = None
    pts: List[LngLat] = []

    def flush():
        if current and len(pts) > 1:
            segments.append(ProvinceSegment(province=current, path=list(pts), mid=pts[len(pts) // 2]))

    for i, p in enumerate(samples):
        province = _classify(index, p)
        if i == 0 or province != current:
            flush()
            current, pts = province, [p]
        else:
            pts.append(p)
    flush()

    logger.debug(f"{len(samples)} muestras -> {len(segments)} tramos provinciales")
    return segments


def segment_midpoints(segments: Sequence[ProvinceSegment]) -> List[Tuple[str, LngLat]]:
    return [(seg.province, seg.mid) for seg in segments]
